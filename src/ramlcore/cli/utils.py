import json
import logging
import traceback
from typing import Any

import click

from ramlcore.config import get_env_flag
from ramlcore.exceptions import ValidationError
from ramlcore.types.errors import TypeValidationError


def configure_logging(debug: bool = False) -> None:
    """Configure logging for all modules.

    Args:
        debug: Whether to enable debug logging. Falls back to ``RAMLCORE_DEBUG``.
    """
    if not debug:
        debug = get_env_flag("RAMLCORE_DEBUG")

    level = logging.DEBUG if debug else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicate messages
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    root_logger.addHandler(stream_handler)

    for logger_name in logging.root.manager.loggerDict:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


def _to_json(value: Any) -> Any:
    """Turn violation records nested anywhere in ``value`` into plain dicts."""
    if isinstance(value, TypeValidationError):
        return value.to_dict()
    if isinstance(value, dict):
        return {key: _to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    return value


def format_violation(error: TypeValidationError) -> str:
    """One indented line per violation: ``✗ property: constraint``."""
    return f"  {click.style('✗', fg='red')} {error.property}: {error.constraint}"


def format_error(error: Exception, debug: bool = False) -> dict[str, Any]:
    """Describe a failure as a JSON-ready mapping.

    Boundary validation errors add their rule ``code`` and the individual
    ``violations`` when they carry them.
    """
    error_info: dict[str, Any] = {"error": str(error)}

    if isinstance(error, ValidationError):
        if error.code is not None:
            error_info["code"] = error.code
        if error.errors:
            error_info["violations"] = _to_json(error.errors)

    if debug:
        error_info["type"] = error.__class__.__name__
        error_info["traceback"] = traceback.format_exc()

    return error_info


def output_result(result: Any, json_output: bool = False, debug: bool = False) -> None:
    """Print a command result.

    JSON output wraps the result in ``{"status": "ok", "result": ...}``.
    Human output prints list entries one per line, with violations rendered
    by ``format_violation``.
    """
    if json_output:
        click.echo(json.dumps({"status": "ok", "result": _to_json(result)}, indent=2, default=str))
        return

    rows = result if isinstance(result, list) else [result]
    for row in rows:
        click.echo(format_violation(row) if isinstance(row, TypeValidationError) else row)


def output_error(error: Exception, json_output: bool = False, debug: bool = False) -> None:
    """Print a failure and abort the command with status 1."""
    error_info = format_error(error, debug)

    if json_output:
        click.echo(json.dumps({"status": "error", **error_info}, indent=2, default=str))
    else:
        click.echo(f"{click.style('❌ Error:', fg='red', bold=True)} {error_info['error']}", err=True)
        for violation in getattr(error, "errors", None) or []:
            if isinstance(violation, TypeValidationError):
                click.echo(format_violation(violation), err=True)
        if debug:
            click.echo(f"\n{click.style('Traceback:', fg='yellow')}", err=True)
            click.echo(error_info["traceback"], err=True)

    raise click.Abort()
