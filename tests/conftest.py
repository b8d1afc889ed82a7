"""Shared fixtures for the pmmltargets test suite."""

from __future__ import annotations

import pytest

from pmmltargets.core.types import (
    CastInteger,
    DataField,
    DataType,
    MiningField,
    OpType,
    Target,
    TargetValue,
    UsageType,
)
from pmmltargets.infer.context import EvaluationContext, ModelSchema


@pytest.fixture()
def regression_schema() -> ModelSchema:
    """Two-output regression model with a target rule on ``price``."""
    return ModelSchema(
        target_field="price",
        data_fields=(
            DataField(name="price", data_type=DataType.DOUBLE),
            DataField(name="units", data_type=DataType.INTEGER),
            DataField(name="score", data_type=DataType.DOUBLE),
        ),
        mining_fields=(
            MiningField(name="price", usage_type=UsageType.TARGET),
            MiningField(name="units", usage_type=UsageType.TARGET),
        ),
        targets=(
            Target(
                field="price",
                min=0.0,
                max=100.0,
                rescale_factor=2.0,
                target_values=(TargetValue(default_value=7.0),),
            ),
            Target(field="units", cast_integer=CastInteger.ROUND),
        ),
    )


@pytest.fixture()
def classification_schema() -> ModelSchema:
    """Two-output classification model with priors on ``churn``."""
    return ModelSchema(
        target_field="churn",
        data_fields=(
            DataField(name="churn", optype=OpType.CATEGORICAL, data_type=DataType.STRING, values=("yes", "no")),
            DataField(name="tier", optype=OpType.ORDINAL, data_type=DataType.INTEGER, values=("1", "2", "3")),
        ),
        mining_fields=(MiningField(name="churn", usage_type=UsageType.TARGET),),
        targets=(
            Target(
                field="churn",
                optype=OpType.CATEGORICAL,
                target_values=(
                    TargetValue(value="yes", display_value="Churned", prior_probability=0.3),
                    TargetValue(value="no", display_value="Retained", prior_probability=0.7),
                ),
            ),
        ),
    )


@pytest.fixture()
def default_schema() -> ModelSchema:
    """Single unnamed double output."""
    return ModelSchema()


@pytest.fixture()
def regression_context(regression_schema: ModelSchema) -> EvaluationContext:
    return EvaluationContext(regression_schema)


@pytest.fixture()
def classification_context(classification_schema: ModelSchema) -> EvaluationContext:
    return EvaluationContext(classification_schema)
