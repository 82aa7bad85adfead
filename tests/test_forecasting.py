"""Tests for demand forecasting."""

from datetime import timedelta

import pytest

from food_system.domain.consumption import ConsumptionProfile
from food_system.services.forecasting import MovingAverageForecaster
from tests.conftest import START


def _profile_with(consumed_by_days_ago: dict[int, float]) -> ConsumptionProfile:
    profile = ConsumptionProfile(user_id="u1", created_at=START)
    for days_ago, consumed in sorted(consumed_by_days_ago.items(), reverse=True):
        profile.record_consumption(
            "tomato", 200, consumed, START - timedelta(days=days_ago)
        )
    return profile


def test_no_history_falls_back_to_default_portion() -> None:
    profile = ConsumptionProfile(user_id="u1", created_at=START)

    prediction = MovingAverageForecaster().predict(profile, "tomato", 7, START)

    assert prediction.sample_count == 0
    assert prediction.predicted_daily_consumption == 120.0
    assert prediction.total_predicted_demand == 840.0
    assert prediction.confidence == 0.1


def test_rising_trend_scales_prediction() -> None:
    profile = _profile_with({40: 50, 45: 50, 1: 100, 2: 100})

    prediction = MovingAverageForecaster().predict(profile, "tomato", 1, START)

    assert prediction.historical_average == pytest.approx(100.0)
    assert prediction.trend_factor == pytest.approx(2.0)
    assert prediction.sample_count == 2


def test_confidence_is_bounded() -> None:
    profile = _profile_with({day: 100 for day in range(30)})

    prediction = MovingAverageForecaster().predict(profile, "tomato", 7, START)

    assert prediction.confidence == 0.95


def test_variable_consumption_lowers_confidence() -> None:
    steady = _profile_with({day: 100 for day in range(10)})
    erratic = _profile_with({day: 20 if day % 2 else 180 for day in range(10)})
    forecaster = MovingAverageForecaster()

    steady_confidence = forecaster.predict(steady, "tomato", 7, START).confidence
    erratic_confidence = forecaster.predict(erratic, "tomato", 7, START).confidence

    assert erratic_confidence < steady_confidence
