"""Target post-processing: turn raw model outputs into finalized target values.

Regression outputs go through clamp -> rescale -> integer cast -> data
type cast.  Classification outputs get their winning label computed in
the target field's data type.  Missing outputs fall back to the
target's default value (regression) or prior probabilities
(classification).

Every finalized value is declared into the
:class:`~pmmltargets.infer.context.EvaluationContext` and returned in a
``name -> value`` mapping that preserves the input order.

Typical flow::

    context = EvaluationContext(schema)
    results = evaluate_regression({"price": 12.7}, context)
    # results == {"price": 12.0}; context.lookup("price").value == 12.0
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from pmmltargets.core.defaults import DEFAULT_TARGET
from pmmltargets.core.errors import MissingFieldError, UnsupportedFeatureError
from pmmltargets.core.typeutil import cast, equals, get_data_type, parse_or_cast
from pmmltargets.core.types import CastInteger, Target, TargetValue
from pmmltargets.infer.context import EvaluationContext, create_target_value
from pmmltargets.infer.distribution import Classification, ProbabilityDistribution

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Regression
# ---------------------------------------------------------------------------


def evaluate_regression_default(context: EvaluationContext) -> dict[str | None, Any]:
    """Finalize a regression model that produced no prediction."""
    return evaluate_regression_value(None, context)


def evaluate_regression_value(
    value: float | None, context: EvaluationContext
) -> dict[str | None, Any]:
    """Finalize a single regression prediction for the model's target field."""
    return evaluate_regression({context.schema.target_field: value}, context)


def evaluate_regression(
    predictions: Mapping[str | None, float | None],
    context: EvaluationContext,
) -> dict[str | None, Any]:
    """Finalize regression predictions.

    Args:
        predictions: ``field name -> raw score`` (``None`` when the model
            produced nothing for the field).  The key
            :data:`~pmmltargets.core.defaults.DEFAULT_TARGET` denotes the
            unnamed output.
        context: Evaluation context holding the model schema; receives one
            declaration per field.

    Returns:
        ``field name -> finalized value`` in input order.

    Raises:
        MissingFieldError: If a named field has no data field declaration.
        InvalidFeatureError: If a target's default value is malformed.
        UnsupportedFeatureError: If a target uses an unknown integer cast.
        TypeCheckError: If a value does not fit the field's data type.
    """
    schema = context.schema

    if len(predictions) == 1 and DEFAULT_TARGET in predictions:
        raw_value = predictions[DEFAULT_TARGET]

        data_field = schema.get_default_data_field()

        value: Any = raw_value
        if value is not None:
            value = cast(data_field.data_type, value)

        context.declare(DEFAULT_TARGET, create_target_value(data_field, None, None, value))

        if not _same_value(raw_value, value):
            return {DEFAULT_TARGET: value}
        return dict(predictions)

    result: dict[str | None, Any] = {}

    for name, raw_value in predictions.items():
        value = raw_value

        target = schema.get_target(name)
        if target is not None:
            if value is None:
                value = get_default_value(target)
                logger.debug("No prediction for %r; default value is %r", name, value)

            if value is not None:
                value = process_value(target, value)

        data_field = schema.get_data_field(name)
        if data_field is None:
            raise MissingFieldError(name)

        if value is not None:
            value = cast(data_field.data_type, value)

        mining_field = schema.get_mining_field(name)

        context.declare(name, create_target_value(data_field, mining_field, target, value))

        if len(predictions) == 1:
            return {name: value}

        result[name] = value

    return result


def process_value(target: Target, value: float) -> float:
    """Apply the target's clamp, rescale and integer cast to *value*.

    Rounding uses Python's :func:`round` (ties to even): ``2.5 -> 2.0``,
    ``3.5 -> 4.0``.  Infinities and NaN skip the integer cast.

    Raises:
        UnsupportedFeatureError: If ``target.cast_integer`` is not a known
            :class:`~pmmltargets.core.types.CastInteger`.
    """
    result = float(value)

    if target.min is not None:
        result = max(result, target.min)
    if target.max is not None:
        result = min(result, target.max)

    result = result * target.rescale_factor + target.rescale_constant

    if not math.isfinite(result):
        return result

    match target.cast_integer:
        case None:
            return result
        case CastInteger.ROUND:
            return float(round(result))
        case CastInteger.CEILING:
            return float(math.ceil(result))
        case CastInteger.FLOOR:
            return float(math.floor(result))
        case _:
            raise UnsupportedFeatureError(target, target.cast_integer)


def get_default_value(target: Target) -> float | None:
    """Return the continuous default declared by *target*, if any.

    Raises:
        InvalidFeatureError: If the target-value list is not a single
            ``default_value``-only entry.
    """
    target_value = target.default_target_value()
    if target_value is None:
        return None
    return target_value.default_value


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def evaluate_classification_default(
    context: EvaluationContext,
) -> dict[str | None, Classification | None]:
    """Finalize a classification model that produced no distribution."""
    return evaluate_classification_value(None, context)


def evaluate_classification_value(
    value: Classification | None, context: EvaluationContext
) -> dict[str | None, Classification | None]:
    """Finalize a single classification for the model's target field."""
    return evaluate_classification({context.schema.target_field: value}, context)


def evaluate_classification(
    predictions: Mapping[str | None, Classification | None],
    context: EvaluationContext,
) -> dict[str | None, Classification | None]:
    """Finalize classification predictions.

    Each non-missing classification computes its winning label in the
    field's data type; that label (not the classification) is declared
    into *context*.  The returned mapping carries the classifications.

    Raises:
        MissingFieldError: If a named field has no data field declaration.
        InvalidFeatureError: If a target's prior probabilities are malformed.
        TypeCheckError: If a winning label does not fit the field's data type.
    """
    schema = context.schema

    if len(predictions) == 1 and DEFAULT_TARGET in predictions:
        value = predictions[DEFAULT_TARGET]

        data_field = schema.get_default_data_field()

        if value is not None:
            value.compute_result(data_field.data_type)

        context.declare(
            DEFAULT_TARGET,
            create_target_value(data_field, None, None, value.result if value is not None else None),
        )
        return dict(predictions)

    result: dict[str | None, Classification | None] = {}

    for name, value in predictions.items():
        target = schema.get_target(name)
        if target is not None and value is None:
            value = get_prior_probabilities(target)
            logger.debug("No prediction for %r; prior probabilities are %r", name, value)

        data_field = schema.get_data_field(name)
        if data_field is None:
            raise MissingFieldError(name)

        if value is not None:
            value.compute_result(data_field.data_type)

        mining_field = schema.get_mining_field(name)

        context.declare(
            name,
            create_target_value(
                data_field, mining_field, target, value.result if value is not None else None
            ),
        )

        if len(predictions) == 1:
            return {name: value}

        result[name] = value

    return result


def get_prior_probabilities(target: Target) -> ProbabilityDistribution | None:
    """Build the prior distribution declared by *target*.

    Returns ``None`` when no entry carries both a label and a probability.

    Raises:
        InvalidFeatureError: If any entry carries a ``default_value``.
    """
    result = ProbabilityDistribution()
    for target_value in target.prior_target_values():
        result.put(target_value.value, target_value.prior_probability)  # type: ignore[arg-type]

    if result.is_empty():
        return None
    return result


# ---------------------------------------------------------------------------
# Target value lookup
# ---------------------------------------------------------------------------


def get_target_value(target: Target, value: Any) -> TargetValue | None:
    """Return the first entry of *target* whose label equals *value*.

    Labels are parsed into the data type of *value* before comparing, so
    ``1`` matches the label ``"1.0"`` when *value* is a double.

    Raises:
        TypeCheckError: If a label is not a valid literal of *value*'s type.
    """
    data_type = get_data_type(value)

    for target_value in target.target_values:
        if target_value.value is None:
            continue
        if equals(data_type, value, parse_or_cast(data_type, target_value.value)):
            return target_value
    return None


def get_display_value(target: Target | None, value: Any) -> str | None:
    """Return the display label declared for *value*, if any."""
    if target is None or value is None:
        return None
    target_value = get_target_value(target, value)
    if target_value is None:
        return None
    return target_value.display_value


def _same_value(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is right
    return type(left) is type(right) and bool(left == right)
