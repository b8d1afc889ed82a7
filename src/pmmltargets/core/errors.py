"""Error kinds raised while finalizing model outputs.

All of them are fatal to the current evaluation request.
"""

from __future__ import annotations

from typing import Any


class EvaluationError(Exception):
    """Base class for errors raised during target post-processing."""


class MissingFieldError(EvaluationError):
    """Raised when a named field has no resolvable field descriptor."""

    def __init__(self, name: str | None) -> None:
        super().__init__(f"Field {name!r} is not defined")
        self.name = name


class InvalidFeatureError(EvaluationError):
    """Raised when a model element violates its declared constraints.

    *element* is the offending target or target value entry.
    """

    def __init__(self, element: Any, reason: str | None = None) -> None:
        message = f"Invalid element {element!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.element = element
        self.reason = reason


class UnsupportedFeatureError(EvaluationError):
    """Raised when a model element uses a feature this engine cannot apply."""

    def __init__(self, element: Any, feature: Any) -> None:
        super().__init__(f"Element {element!r} uses unsupported feature {feature!r}")
        self.element = element
        self.feature = feature


class TypeCheckError(EvaluationError):
    """Raised when a value cannot be represented in the requested data type."""

    def __init__(self, data_type: Any, value: Any) -> None:
        super().__init__(
            f"Value {value!r} ({type(value).__name__}) cannot be cast to {data_type}"
        )
        self.data_type = data_type
        self.value = value
