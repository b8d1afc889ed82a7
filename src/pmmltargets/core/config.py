"""Model schema persistence: YAML documents describing fields and targets.

Example document::

    target_field: price
    data_fields:
      - name: price
        optype: continuous
        data_type: integer
    mining_fields:
      - name: price
        usage_type: target
    targets:
      - field: price
        min: 0
        max: 1000
        rescale_factor: 1.5
        cast_integer: round
        target_values:
          - default_value: 100

Usage::

    schema = load_model_schema(Path("configs/model.yaml"))
    context = EvaluationContext(schema)
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from pmmltargets.infer.context import ModelSchema

logger = logging.getLogger(__name__)


def load_model_schema(path: Path) -> ModelSchema:
    """Load and validate a model schema from a YAML file.

    Args:
        path: Path to a YAML file matching the model schema format.

    Returns:
        Validated ``ModelSchema``.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError / ValidationError: If the YAML is malformed or invalid.
    """
    raw = yaml.safe_load(path.read_text("utf-8"))
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Model schema in {path} must be a mapping, got {type(raw).__name__}")
    schema = ModelSchema.model_validate(raw)
    logger.info(
        "Loaded model schema from %s (%d data fields, %d targets)",
        path,
        len(schema.data_fields),
        len(schema.targets),
    )
    return schema


def save_model_schema(schema: ModelSchema, path: Path) -> Path:
    """Serialize a model schema to YAML.

    Unset optional attributes are omitted so the output stays readable.

    Args:
        schema: Validated schema to write.
        path: Destination file path.

    Returns:
        The *path* that was written.
    """
    data = schema.model_dump(mode="json", exclude_none=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False), "utf-8")
    return path
