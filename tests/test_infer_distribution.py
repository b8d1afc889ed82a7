"""Tests for Classification / ProbabilityDistribution."""

from __future__ import annotations

import numpy as np
import pytest

from pmmltargets.core.errors import EvaluationError
from pmmltargets.core.types import DataType
from pmmltargets.infer.distribution import Classification, ProbabilityDistribution


class TestClassification:
    def test_winner_is_highest_weight(self) -> None:
        votes = Classification({"a": 1.0, "b": 3.0, "c": 2.0})
        assert votes.compute_result(DataType.STRING) == "b"
        assert votes.result == "b"

    def test_ties_go_to_first_inserted(self) -> None:
        votes = Classification()
        votes.put("x", 2.0)
        votes.put("y", 2.0)
        assert votes.compute_result(DataType.STRING) == "x"

    def test_weights_are_not_normalized(self) -> None:
        votes = Classification({"a": 1.0, "b": 3.0})
        votes.compute_result(DataType.STRING)
        assert votes.get("b") == 3.0

    def test_result_before_compute_raises(self) -> None:
        with pytest.raises(EvaluationError):
            _ = Classification({"a": 1.0}).result

    def test_empty_compute_raises(self) -> None:
        votes = Classification()
        assert votes.is_empty()
        with pytest.raises(EvaluationError):
            votes.compute_result(DataType.STRING)

    def test_put_after_compute_raises(self) -> None:
        votes = Classification({"a": 1.0})
        votes.compute_result(DataType.STRING)
        with pytest.raises(EvaluationError):
            votes.put("b", 2.0)

    def test_equality(self) -> None:
        assert Classification({"a": 1.0}) == Classification({"a": 1.0})
        assert Classification({"a": 1.0}) != Classification({"a": 2.0})
        assert Classification({"a": 1.0}) != ProbabilityDistribution({"a": 1.0})

    def test_entries_is_a_copy(self) -> None:
        votes = Classification({"a": 1.0})
        votes.entries()["b"] = 2.0
        assert len(votes) == 1


class TestProbabilityDistribution:
    def test_normalizes_on_compute(self) -> None:
        dist = ProbabilityDistribution({"a": 1.0, "b": 3.0})
        dist.compute_result(DataType.STRING)
        assert dist.get_probability("a") == pytest.approx(0.25)
        assert dist.get_probability("b") == pytest.approx(0.75)

    def test_normalized_input_untouched(self) -> None:
        dist = ProbabilityDistribution({"a": 0.25, "b": 0.75})
        dist.compute_result(DataType.STRING)
        assert dist.entries() == {"a": 0.25, "b": 0.75}

    def test_unknown_label_probability(self) -> None:
        assert ProbabilityDistribution({"a": 1.0}).get_probability("z") == 0.0

    def test_negative_probability_rejected(self) -> None:
        with pytest.raises(EvaluationError):
            ProbabilityDistribution({"a": -0.1})

    def test_numeric_labels(self) -> None:
        dist = ProbabilityDistribution({"1.5": 0.4, "2.5": 0.6})
        assert dist.compute_result(DataType.DOUBLE) == 2.5
        assert isinstance(dist.compute_result(DataType.FLOAT), np.float32)
