"""Typer CLI entrypoint and command definitions for pmmltargets."""

import json
import logging
from pathlib import Path
from typing import Any

import typer
import yaml

from pmmltargets.core.defaults import DEFAULT_LOG_LEVEL, DEFAULT_TARGET, DEFAULT_TARGET_KEY

app = typer.Typer()


@app.callback()
def main(
    log_level: str = typer.Option(DEFAULT_LOG_LEVEL, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)"),
) -> None:
    """Finalize raw model outputs against declared PMML-style targets."""
    logging.basicConfig(level=log_level.upper())


def _read_file(path_str: str) -> Path:
    path = Path(path_str)
    if not path.exists():
        typer.echo(f"File not found: {path}", err=True)
        raise typer.Exit(code=1)
    return path


def _load_schema(path_str: str):
    from pmmltargets.core.config import load_model_schema

    try:
        return load_model_schema(_read_file(path_str))
    except (ValueError, yaml.YAMLError) as exc:
        typer.echo(f"Invalid model schema: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _load_predictions(path_str: str) -> dict[str | None, Any]:
    try:
        raw = json.loads(_read_file(path_str).read_text("utf-8"))
    except json.JSONDecodeError as exc:
        typer.echo(f"Invalid predictions file: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    if not isinstance(raw, dict):
        typer.echo("Predictions file must contain a JSON object", err=True)
        raise typer.Exit(code=1)
    return {
        (DEFAULT_TARGET if key == DEFAULT_TARGET_KEY else key): value
        for key, value in raw.items()
    }


def _output_key(name: str | None) -> str:
    return DEFAULT_TARGET_KEY if name is DEFAULT_TARGET else name


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    return float(value)


# -- schema -------------------------------------------------------------------
schema_app = typer.Typer()
app.add_typer(schema_app, name="schema")


@schema_app.command("validate")
def schema_validate_cmd(
    schema: str = typer.Option(..., "--schema", help="Path to model schema YAML"),
) -> None:
    """Validate a model schema and summarize its targets."""
    model_schema = _load_schema(schema)

    typer.echo(
        f"Valid schema: {len(model_schema.data_fields)} data fields, "
        f"{len(model_schema.targets)} targets"
    )
    for target in model_schema.targets:
        cast_integer = target.cast_integer or "none"
        typer.echo(
            f"  {_output_key(target.field)}: min={target.min} max={target.max} "
            f"rescale={target.rescale_factor}*x+{target.rescale_constant} "
            f"cast_integer={cast_integer} target_values={len(target.target_values)}"
        )


# -- evaluate -----------------------------------------------------------------
evaluate_app = typer.Typer()
app.add_typer(evaluate_app, name="evaluate")


@evaluate_app.command("regression")
def evaluate_regression_cmd(
    schema: str = typer.Option(..., "--schema", help="Path to model schema YAML"),
    predictions: str = typer.Option(..., "--predictions", help="JSON object of field name -> raw score or null"),
) -> None:
    """Finalize raw regression scores and print them as JSON."""
    from pmmltargets.core.errors import EvaluationError
    from pmmltargets.infer.context import EvaluationContext
    from pmmltargets.infer.targets import evaluate_regression

    model_schema = _load_schema(schema)
    raw = _load_predictions(predictions)

    for name, value in raw.items():
        if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
            typer.echo(f"Prediction for {_output_key(name)!r} must be a number or null", err=True)
            raise typer.Exit(code=1)

    context = EvaluationContext(model_schema)
    try:
        results = evaluate_regression(raw, context)
    except EvaluationError as exc:
        typer.echo(f"Evaluation failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    output = {_output_key(name): _jsonable(value) for name, value in results.items()}
    typer.echo(json.dumps(output, indent=2))


@evaluate_app.command("classification")
def evaluate_classification_cmd(
    schema: str = typer.Option(..., "--schema", help="Path to model schema YAML"),
    predictions: str = typer.Option(..., "--predictions", help="JSON object of field name -> {label: probability} or null"),
) -> None:
    """Finalize class probability distributions and print results as JSON."""
    from pmmltargets.core.errors import EvaluationError
    from pmmltargets.infer.context import EvaluationContext
    from pmmltargets.infer.distribution import ProbabilityDistribution
    from pmmltargets.infer.targets import evaluate_classification, get_display_value

    model_schema = _load_schema(schema)
    raw = _load_predictions(predictions)

    distributions: dict[str | None, ProbabilityDistribution | None] = {}
    try:
        for name, value in raw.items():
            if value is not None and not isinstance(value, dict):
                typer.echo(f"Prediction for {_output_key(name)!r} must be an object or null", err=True)
                raise typer.Exit(code=1)
            if value is None:
                distributions[name] = None
                continue
            try:
                distributions[name] = ProbabilityDistribution(value)
            except (TypeError, ValueError) as exc:
                typer.echo(f"Invalid distribution for {_output_key(name)!r}: {exc}", err=True)
                raise typer.Exit(code=1) from exc

        context = EvaluationContext(model_schema)
        results = evaluate_classification(distributions, context)
    except EvaluationError as exc:
        typer.echo(f"Evaluation failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    output: dict[str, Any] = {}
    for name, distribution in results.items():
        if distribution is None:
            output[_output_key(name)] = None
            continue
        record = context.lookup(name)
        output[_output_key(name)] = {
            "result": _jsonable(record.value),
            "display_value": get_display_value(record.target, record.value),
            "probabilities": distribution.entries(),
        }
    typer.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    app()
