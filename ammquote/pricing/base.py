"""Pricing model abstraction.

A model turns pool holdings into one non-negative weight per outcome; the
base class normalises the weights into probabilities. A pool whose weights
sum to zero (or go negative) has no meaningful price, and every outcome gets
the same probability instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Sequence


class PricingModel(ABC):
    @abstractmethod
    def weights(self, holdings: Sequence[int]) -> List[int]:
        """Unnormalised price weight per outcome."""
        ...

    def fractions(self, holdings: Sequence[int]) -> List[float]:
        """Prices in [0, 1] summing to 1."""
        if not holdings:
            return []
        weights = self.weights(holdings)
        total = sum(weights)
        if total <= 0 or min(weights) < 0:
            return [1.0 / len(holdings)] * len(holdings)
        # int / int stays exact until the final float rounding
        return [w / total for w in weights]

    def prices(self, holdings: Sequence[int]) -> List[float]:
        """Probabilities in [0, 100] summing to 100."""
        return [f * 100 for f in self.fractions(holdings)]
