"""Demand forecasting strategies for consumption profiles."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from statistics import fmean, pstdev
from typing import Protocol

from food_system.domain.consumption import (
    ConsumptionProfile,
    ConsumptionRecord,
    DemandPrediction,
    default_portion,
    season_for,
)

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 0.95
MIN_VARIABILITY_FACTOR = 0.3


class DemandForecaster(Protocol):
    """Strategy interface for projecting ingredient demand."""

    def predict(
        self,
        profile: ConsumptionProfile,
        ingredient: str,
        days_ahead: int,
        now: datetime,
    ) -> DemandPrediction:
        """Return a demand projection for ``days_ahead`` days."""


@dataclass
class MovingAverageForecaster(DemandForecaster):
    """Naive moving-average projection with seasonal and trend ratios.

    This is a placeholder estimator, not a validated time-series model.
    """

    history_days: int = 30
    trend_prior_days: int = 60
    seasonal_baseline_days: int = 365
    variability_days: int = 14
    full_confidence_samples: int = 30

    def predict(
        self,
        profile: ConsumptionProfile,
        ingredient: str,
        days_ahead: int,
        now: datetime,
    ) -> DemandPrediction:
        history_start = now - timedelta(days=self.history_days)
        recent = profile.records_for(ingredient, since=history_start)
        if not recent:
            portion = default_portion(ingredient)
            return DemandPrediction(
                ingredient=ingredient,
                days_ahead=days_ahead,
                predicted_daily_consumption=portion,
                total_predicted_demand=portion * days_ahead,
                confidence=MIN_CONFIDENCE,
                historical_average=portion,
                seasonal_factor=1.0,
                trend_factor=1.0,
                sample_count=0,
            )

        average = _mean_consumed(recent)
        seasonal = self._seasonal_factor(profile, ingredient, now)
        prior = profile.records_for(
            ingredient,
            since=history_start - timedelta(days=self.trend_prior_days),
            until=history_start,
        )
        trend = _ratio(average, _mean_consumed(prior))
        daily = average * seasonal * trend
        return DemandPrediction(
            ingredient=ingredient,
            days_ahead=days_ahead,
            predicted_daily_consumption=daily,
            total_predicted_demand=daily * days_ahead,
            confidence=self._confidence(profile, ingredient, len(recent), now),
            historical_average=average,
            seasonal_factor=seasonal,
            trend_factor=trend,
            sample_count=len(recent),
        )

    def _seasonal_factor(
        self, profile: ConsumptionProfile, ingredient: str, now: datetime
    ) -> float:
        season = season_for(now)
        bucket = [
            record
            for record in profile.records_for(ingredient)
            if record.season == season
        ]
        yearly = profile.records_for(
            ingredient, since=now - timedelta(days=self.seasonal_baseline_days)
        )
        return _ratio(_mean_consumed(bucket), _mean_consumed(yearly))

    def _confidence(
        self,
        profile: ConsumptionProfile,
        ingredient: str,
        sample_count: int,
        now: datetime,
    ) -> float:
        confidence = min(sample_count / self.full_confidence_samples, 1.0)
        window = profile.records_for(
            ingredient, since=now - timedelta(days=self.variability_days)
        )
        if len(window) > 1:
            amounts = [record.portion_consumed for record in window]
            mean = fmean(amounts)
            if mean > 0:
                variation = pstdev(amounts) / mean
                confidence *= max(MIN_VARIABILITY_FACTOR, 1 - variation)
        return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))


def _mean_consumed(records: list[ConsumptionRecord]) -> float:
    if not records:
        return 0.0
    return fmean(record.portion_consumed for record in records)


def _ratio(numerator: float, denominator: float) -> float:
    if numerator <= 0 or denominator <= 0:
        return 1.0
    return numerator / denominator
