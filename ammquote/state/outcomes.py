"""Editable outcome distribution for market creation.

Outcomes are identified by position. Every edit builds a new tuple and swaps
it in as a whole, so readers never see half of a binary update.

Rules:
* probabilities must be within [0, 100]; anything else is ignored
* with exactly two outcomes, editing one sets the other to ``100 - value``
* with three or more, only the edited outcome changes and the total may drift
  from 100 until the user fixes it
* in uniform mode every outcome gets ``100 / n`` after add/remove/toggle and
  manual probability edits are ignored
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..core.types import Outcome

OutcomeSet = Tuple[Outcome, ...]


def uniform(outcomes: Sequence[Outcome]) -> OutcomeSet:
    # no remainder correction: 3 outcomes get 33.333... each
    n = len(outcomes)
    return tuple(replace(o, probability=100 / n) for o in outcomes)


def total_probability(outcomes: Sequence[Outcome]) -> float:
    return sum(o.probability for o in outcomes)


def total_error_messages(outcomes: Sequence[Outcome]) -> List[str]:
    """Messages for the editing surface; the manager itself never enforces these."""
    messages = []
    total = total_probability(outcomes)
    if outcomes and abs(total - 100) > 1e-9:
        messages.append("The sum of all probabilities must be equal to 100%")
    names = [o.name.strip().lower() for o in outcomes]
    if any(not n for n in names):
        messages.append("Outcome names can't be empty")
    if len(set(names)) != len(names):
        messages.append("Outcome names must be unique")
    return messages


class OutcomeDistributionManager:
    def __init__(
        self,
        outcomes: Optional[Iterable[Outcome]] = None,
        is_uniform: bool = False,
        on_change: Optional[Callable[[OutcomeSet], None]] = None,
    ):
        self._outcomes: OutcomeSet = tuple(outcomes or ())
        self._uniform = is_uniform
        self.on_change = on_change
        if self._uniform and self._outcomes:
            self._outcomes = uniform(self._outcomes)

    @property
    def outcomes(self) -> OutcomeSet:
        return self._outcomes

    @property
    def is_uniform(self) -> bool:
        return self._uniform

    @property
    def total(self) -> float:
        return total_probability(self._outcomes)

    def __len__(self) -> int:
        return len(self._outcomes)

    def _commit(self, outcomes: Sequence[Outcome]):
        self._outcomes = tuple(outcomes)
        if self.on_change is not None:
            self.on_change(self._outcomes)

    def _check_index(self, index: int):
        if not 0 <= index < len(self._outcomes):
            raise IndexError(f"outcome index {index} out of range")

    def set_probability(self, index: int, value: float) -> bool:
        """Returns False (and changes nothing) if the edit was rejected."""
        self._check_index(index)
        if not 0 <= value <= 100 or self._uniform:
            return False
        current = self._outcomes
        if len(current) == 2:
            other = 100 - value
            self._commit(
                (
                    replace(current[0], probability=value if index == 0 else other),
                    replace(current[1], probability=other if index == 0 else value),
                )
            )
        else:
            edited = replace(current[index], probability=value)
            self._commit(current[:index] + (edited,) + current[index + 1 :])
        return True

    def set_name(self, index: int, name: str):
        self._check_index(index)
        current = self._outcomes
        self._commit(current[:index] + (replace(current[index], name=name),) + current[index + 1 :])

    def add_outcome(self, name: str, probability: float = 0.0):
        outcomes = self._outcomes + (Outcome(name=name.strip(), probability=probability),)
        self._commit(uniform(outcomes) if self._uniform else outcomes)

    def remove_outcome(self, index: int):
        self._check_index(index)
        outcomes = self._outcomes[:index] + self._outcomes[index + 1 :]
        self._commit(uniform(outcomes) if self._uniform and outcomes else outcomes)

    def toggle_uniform(self) -> bool:
        self._uniform = not self._uniform
        if self._uniform and self._outcomes:
            self._commit(uniform(self._outcomes))
        else:
            # leaving uniform mode keeps the current values as the manual baseline
            self._commit(self._outcomes)
        return self._uniform

    def suggest_max(self, outcomes: Optional[Sequence[Outcome]] = None) -> float:
        """Probability that would bring the total to exactly 100."""
        if outcomes is None:
            outcomes = self._outcomes
        return 100 - total_probability(outcomes)
