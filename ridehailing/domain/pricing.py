"""
Fare Pricing  (Strategy Pattern)
================================

Formula
-------
Fare = (Base_Fare + Distance x Rate_Per_KM) x Surge_Multiplier

The fare is fixed when the ride is requested and never recomputed, so the
policy must be deterministic: the same distance and settings always give
the same fare, and the fare never decreases as the distance grows.

Complexity: O(1) per fare calculation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# ── Strategy hierarchy ────────────────────────────────────────────────


class PricingStrategy(ABC):
    @abstractmethod
    def calculate(
        self, distance_km: float, base_fare: float, rate_per_km: float
    ) -> float: ...


class StandardPricing(PricingStrategy):
    def calculate(
        self, distance_km: float, base_fare: float, rate_per_km: float
    ) -> float:
        return base_fare + distance_km * rate_per_km


class SurgePricing(PricingStrategy):
    def __init__(self, surge_multiplier: float = 1.0):
        if surge_multiplier < 1.0:
            raise ValueError("surge_multiplier must be >= 1.0")
        self.surge_multiplier = surge_multiplier

    def calculate(
        self, distance_km: float, base_fare: float, rate_per_km: float
    ) -> float:
        return (base_fare + distance_km * rate_per_km) * self.surge_multiplier


# ── Engine facade ─────────────────────────────────────────────────────


class PricingEngine:
    """Fare policy handed to ``Ride.create``."""

    def __init__(
        self,
        base_fare: float = 5.0,
        rate_per_km: float = 2.1,
        surge_multiplier: float = 1.0,
    ):
        if base_fare < 0 or rate_per_km < 0:
            raise ValueError("base_fare and rate_per_km must be non-negative")
        self.base_fare = base_fare
        self.rate_per_km = rate_per_km
        self.strategy: PricingStrategy = (
            SurgePricing(surge_multiplier)
            if surge_multiplier != 1.0
            else StandardPricing()
        )

    def calculate_fare(self, distance_km: float) -> float:
        fare = self.strategy.calculate(
            distance_km, self.base_fare, self.rate_per_km
        )
        return round(fare, 2)
