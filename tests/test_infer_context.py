"""Tests for ModelSchema lookups and the per-evaluation context."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pmmltargets.core.defaults import DEFAULT_TARGET
from pmmltargets.core.errors import MissingFieldError
from pmmltargets.core.types import DataField, DataType, MiningField, Target
from pmmltargets.infer.context import EvaluationContext, ModelSchema, create_target_value


class TestModelSchema:
    def test_lookups(self, regression_schema: ModelSchema) -> None:
        assert regression_schema.get_data_field("units").data_type == DataType.INTEGER
        assert regression_schema.get_data_field("nope") is None
        assert regression_schema.get_target("price").max == 100.0
        assert regression_schema.get_target("score") is None
        assert regression_schema.get_mining_field("price") is not None
        assert regression_schema.get_mining_field("score") is None

    def test_default_data_field_of_named_target(self, regression_schema: ModelSchema) -> None:
        assert regression_schema.get_default_data_field().name == "price"

    def test_default_data_field_of_unnamed_target(self) -> None:
        schema = ModelSchema(default_data_field=DataField(data_type=DataType.STRING))
        assert schema.get_default_data_field().data_type == DataType.STRING

    def test_unnamed_target_lookup(self) -> None:
        target = Target(min=0.0)
        assert ModelSchema(targets=(target,)).get_target(DEFAULT_TARGET) is target

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"data_fields": (DataField(name="a"), DataField(name="a"))},
            {"mining_fields": (MiningField(name="a"), MiningField(name="a"))},
            {"targets": (Target(field="a"), Target(field="a"))},
            {"data_fields": (DataField(),)},
            {"target_field": "missing"},
        ],
    )
    def test_rejects_invalid(self, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            ModelSchema(**kwargs)


class TestEvaluationContext:
    def test_declare_and_lookup(self, regression_schema: ModelSchema) -> None:
        context = EvaluationContext(regression_schema)
        data_field = regression_schema.get_data_field("score")
        record = create_target_value(data_field, None, None, 1.5)
        context.declare("score", record)
        assert context.lookup("score") is record
        assert record.name == "score"
        assert record.data_type == DataType.DOUBLE

    def test_lookup_undeclared(self, regression_schema: ModelSchema) -> None:
        with pytest.raises(MissingFieldError):
            EvaluationContext(regression_schema).lookup("score")

    def test_declare_overwrites(self, regression_schema: ModelSchema) -> None:
        context = EvaluationContext(regression_schema)
        data_field = regression_schema.get_data_field("score")
        context.declare("score", create_target_value(data_field, None, None, 1.0))
        context.declare("score", create_target_value(data_field, None, None, 2.0))
        assert context.lookup("score").value == 2.0
        assert len(context.declared_fields) == 1

    def test_declared_fields_read_only(self, regression_schema: ModelSchema) -> None:
        context = EvaluationContext(regression_schema)
        with pytest.raises(TypeError):
            context.declared_fields["score"] = None  # type: ignore[index]

    def test_contexts_are_independent(self, regression_schema: ModelSchema) -> None:
        first = EvaluationContext(regression_schema)
        second = EvaluationContext(regression_schema)
        data_field = regression_schema.get_data_field("score")
        first.declare("score", create_target_value(data_field, None, None, 1.0))
        assert "score" not in second.declared_fields
