"""Field resolution and per-evaluation cache of finalized target values.

* :class:`ModelSchema` — read-only lookup of data fields, mining fields
  and targets by name.  Shared by every evaluation of a model.
* :class:`EvaluationContext` — per-request container into which the
  finalizers declare one :class:`TargetFieldValue` per target field.
  Never shared between requests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, Field, PrivateAttr, model_validator

from pmmltargets.core.defaults import DEFAULT_TARGET
from pmmltargets.core.errors import MissingFieldError
from pmmltargets.core.types import DataField, DataType, MiningField, Target

logger = logging.getLogger(__name__)


class ModelSchema(BaseModel, frozen=True):
    """Field and target declarations of one model.

    ``target_field`` names the model's primary output; ``None`` means the
    output is unnamed, in which case ``default_data_field`` describes it.
    """

    data_fields: tuple[DataField, ...] = ()
    mining_fields: tuple[MiningField, ...] = ()
    targets: tuple[Target, ...] = ()
    target_field: str | None = Field(default=DEFAULT_TARGET, description="Primary output field name.")
    default_data_field: DataField = Field(
        default_factory=lambda: DataField(name=DEFAULT_TARGET),
        description="Descriptor of the unnamed output.",
    )

    _data_fields: dict[str, DataField] = PrivateAttr(default_factory=dict)
    _mining_fields: dict[str, MiningField] = PrivateAttr(default_factory=dict)
    _targets: dict[str | None, Target] = PrivateAttr(default_factory=dict)

    @model_validator(mode="after")
    def _check_names(self) -> ModelSchema:
        for kind, names in (
            ("data field", [f.name for f in self.data_fields]),
            ("mining field", [f.name for f in self.mining_fields]),
            ("target", [t.field for t in self.targets]),
        ):
            seen: set[str | None] = set()
            for name in names:
                if name in seen:
                    raise ValueError(f"Duplicate {kind} name: {name!r}")
                seen.add(name)
        if any(f.name is None for f in self.data_fields):
            raise ValueError("Declared data fields must be named")
        if self.target_field is not None and self.target_field not in {
            f.name for f in self.data_fields
        }:
            raise ValueError(f"Target field {self.target_field!r} is not a declared data field")
        return self

    def model_post_init(self, __context: Any) -> None:
        self._data_fields.update({f.name: f for f in self.data_fields if f.name is not None})
        self._mining_fields.update({f.name: f for f in self.mining_fields})
        self._targets.update({t.field: t for t in self.targets})

    def get_data_field(self, name: str | None) -> DataField | None:
        return self._data_fields.get(name)  # type: ignore[arg-type]

    def get_default_data_field(self) -> DataField:
        """Descriptor of the model's primary output field."""
        if self.target_field is DEFAULT_TARGET:
            return self.default_data_field
        data_field = self.get_data_field(self.target_field)
        if data_field is None:
            raise MissingFieldError(self.target_field)
        return data_field

    def get_target(self, name: str | None) -> Target | None:
        return self._targets.get(name)

    def get_mining_field(self, name: str | None) -> MiningField | None:
        return self._mining_fields.get(name)  # type: ignore[arg-type]


@dataclass(frozen=True)
class TargetFieldValue:
    """Cache record of one finalized target field."""

    data_field: DataField
    mining_field: MiningField | None
    target: Target | None
    value: Any

    @property
    def name(self) -> str | None:
        return self.data_field.name

    @property
    def data_type(self) -> DataType:
        return self.data_field.data_type


def create_target_value(
    data_field: DataField,
    mining_field: MiningField | None,
    target: Target | None,
    value: Any,
) -> TargetFieldValue:
    """Bundle a finalized value with the descriptors it was produced under."""
    return TargetFieldValue(
        data_field=data_field,
        mining_field=mining_field,
        target=target,
        value=value,
    )


class EvaluationContext:
    """Per-evaluation cache of finalized target values.

    Owned by exactly one evaluation request.  The schema is shared and
    only ever read.

    Args:
        schema: Field and target declarations of the evaluated model.
    """

    def __init__(self, schema: ModelSchema) -> None:
        self.schema = schema
        self._fields: dict[str | None, TargetFieldValue] = {}

    def declare(self, name: str | None, value: TargetFieldValue) -> None:
        """Record *value* under *name*, replacing any earlier declaration."""
        if name in self._fields:
            logger.debug("Redeclaring field %r", name)
        self._fields[name] = value

    def lookup(self, name: str | None) -> TargetFieldValue:
        """Return the record declared under *name*.

        Raises:
            MissingFieldError: If nothing was declared under *name*.
        """
        try:
            return self._fields[name]
        except KeyError:
            raise MissingFieldError(name) from None

    @property
    def declared_fields(self) -> Mapping[str | None, TargetFieldValue]:
        """Read-only view of every declared record, in declaration order."""
        return MappingProxyType(self._fields)
