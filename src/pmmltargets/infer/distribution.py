"""Classification outputs: label -> weight maps with a computed winning label.

A :class:`Classification` is built by the model (or from target priors),
then :meth:`~Classification.compute_result` fixes the winning label in
the target field's declared data type.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

import numpy as np

from pmmltargets.core.defaults import PROBABILITY_SUM_TOLERANCE
from pmmltargets.core.errors import EvaluationError
from pmmltargets.core.typeutil import parse_or_cast
from pmmltargets.core.types import DataType


class Classification:
    """Insertion-ordered mapping of category labels to weights.

    Args:
        entries: Optional initial ``label -> weight`` pairs.
    """

    def __init__(self, entries: Mapping[str, float] | None = None) -> None:
        self._entries: dict[str, float] = {}
        self._result: Any = None
        self._computed = False
        if entries:
            for label, weight in entries.items():
                self.put(label, weight)

    def put(self, label: str, weight: float) -> None:
        if self._computed:
            raise EvaluationError(f"{type(self).__name__} is already computed")
        self._entries[label] = float(weight)

    def get(self, label: str) -> float | None:
        return self._entries.get(label)

    def is_empty(self) -> bool:
        return not self._entries

    def entries(self) -> dict[str, float]:
        """Return a copy of the ``label -> weight`` mapping."""
        return dict(self._entries)

    def compute_result(self, data_type: DataType) -> Any:
        """Pick the highest-weight label and parse it into *data_type*.

        Ties go to the label inserted first.

        Raises:
            EvaluationError: If the classification is empty.
            TypeCheckError: If the winning label is not a valid *data_type* literal.
        """
        if self.is_empty():
            raise EvaluationError(f"{type(self).__name__} has no entries")

        labels = list(self._entries)
        weights = np.fromiter(self._entries.values(), dtype=np.float64, count=len(labels))
        winner = labels[int(weights.argmax())]

        self._result = parse_or_cast(data_type, winner)
        self._computed = True
        return self._result

    @property
    def result(self) -> Any:
        """The winning label, as computed by :meth:`compute_result`."""
        if not self._computed:
            raise EvaluationError(f"{type(self).__name__} result has not been computed")
        return self._result

    @property
    def computed(self) -> bool:
        return self._computed

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._entries == other._entries  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"


class ProbabilityDistribution(Classification):
    """A :class:`Classification` whose weights are probabilities.

    Weights are normalized to sum to 1.0 when the result is computed.
    """

    def put(self, label: str, weight: float) -> None:
        if weight < 0:
            raise EvaluationError(f"Probability of {label!r} must be >= 0, got {weight}")
        super().put(label, weight)

    def get_probability(self, label: str) -> float:
        return self._entries.get(label, 0.0)

    def compute_result(self, data_type: DataType) -> Any:
        self._normalize()
        return super().compute_result(data_type)

    def _normalize(self) -> None:
        if not self._entries:
            return
        probs = np.fromiter(self._entries.values(), dtype=np.float64, count=len(self._entries))
        total = probs.sum()
        if total <= 0 or abs(total - 1.0) <= PROBABILITY_SUM_TOLERANCE:
            return
        probs /= total
        self._entries = {
            label: float(p) for label, p in zip(self._entries, probs)
        }
