"""Core data contracts: field descriptors, targets and target values.

Instances are built once when a model schema is loaded and are shared,
read-only, by every evaluation of that model.  All models are frozen;
nothing in this package mutates them after construction.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from pmmltargets.core.defaults import DEFAULT_RESCALE_CONSTANT, DEFAULT_RESCALE_FACTOR
from pmmltargets.core.errors import InvalidFeatureError


class DataType(StrEnum):
    """Declared representation of a field value."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"


class OpType(StrEnum):
    CATEGORICAL = "categorical"
    ORDINAL = "ordinal"
    CONTINUOUS = "continuous"


class UsageType(StrEnum):
    ACTIVE = "active"
    PREDICTED = "predicted"
    TARGET = "target"
    SUPPLEMENTARY = "supplementary"


class CastInteger(StrEnum):
    """Integer-cast policy of a :class:`Target`.

    The "no cast" policy is expressed as ``Target.cast_integer is None``.
    """

    ROUND = "round"
    CEILING = "ceiling"
    FLOOR = "floor"


class DataField(BaseModel, frozen=True):
    """Declared name, operational type and data type of a model field."""

    name: str | None = Field(default=None, description="Field name; None for the default target field.")
    optype: OpType = OpType.CONTINUOUS
    data_type: DataType = DataType.DOUBLE
    values: tuple[str, ...] = Field(default=(), description="Valid category labels, if enumerated.")


class MiningField(BaseModel, frozen=True):
    """How a model uses a field.  Carried into cache records, never interpreted."""

    name: str
    usage_type: UsageType = UsageType.ACTIVE
    optype: OpType | None = None


class TargetValue(BaseModel, frozen=True):
    """One categorical-label / default / prior record within a :class:`Target`."""

    value: str | None = None
    display_value: str | None = None
    default_value: float | None = None
    prior_probability: float | None = Field(default=None, ge=0.0, le=1.0)


class Target(BaseModel, frozen=True):
    """Post-processing rule for a single target field.

    The numeric pipeline is clamp to ``[min, max]``, then
    ``value * rescale_factor + rescale_constant``, then the optional
    integer cast.  ``target_values`` supplies the fallback used when a
    model produces no output for the field: a single ``default_value``
    for continuous targets, or ``(value, prior_probability)`` pairs for
    categorical ones.

    The shape of ``target_values`` is checked lazily, by
    :meth:`default_target_value` and :meth:`prior_target_values`, because
    fallbacks are only derived when a prediction is missing.
    """

    field: str | None = Field(default=None, description="Target field name; None for the default target.")
    optype: OpType | None = None
    min: float | None = None
    max: float | None = None
    rescale_factor: float = DEFAULT_RESCALE_FACTOR
    rescale_constant: float = DEFAULT_RESCALE_CONSTANT
    cast_integer: CastInteger | None = None
    target_values: tuple[TargetValue, ...] = ()

    def default_target_value(self) -> TargetValue | None:
        """Return the entry holding the continuous default, if any.

        Raises:
            InvalidFeatureError: If there is more than one entry, or the
                single entry carries a category label or prior probability.
        """
        if not self.target_values:
            return None

        if len(self.target_values) != 1:
            raise InvalidFeatureError(
                self, f"expected a single TargetValue, got {len(self.target_values)}"
            )

        target_value = self.target_values[0]
        # value and prior_probability apply only to categorical or ordinal targets
        if target_value.value is not None or target_value.prior_probability is not None:
            raise InvalidFeatureError(
                target_value, "value and prior_probability are not allowed on a default TargetValue"
            )
        return target_value

    def prior_target_values(self) -> list[TargetValue]:
        """Return the entries that contribute to the prior distribution.

        Entries lacking either ``value`` or ``prior_probability`` are skipped.

        Raises:
            InvalidFeatureError: If any entry carries a ``default_value``.
        """
        result: list[TargetValue] = []
        for target_value in self.target_values:
            # default_value applies only to continuous targets
            if target_value.default_value is not None:
                raise InvalidFeatureError(
                    target_value, "default_value is not allowed on a prior TargetValue"
                )
            if target_value.value is None or target_value.prior_probability is None:
                continue
            result.append(target_value)
        return result
