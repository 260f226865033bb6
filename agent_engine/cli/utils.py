"""
CLI utility functions.

This module provides helpers for logging setup, reading command input,
writing the JSON response envelope, and extracting values from it.

Example:
    >>> from agent_engine.cli.utils import ResponseCode, transport_response
    >>> transport_response(ResponseCode.SUCCESS, {"reply": "hi"}, "success")
    {"code": 200, "data": {"reply": "hi"}, "message": "success"}
"""

import json
import logging
from enum import IntEnum
from typing import Any, Dict, List, Optional

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Singleton console instance (stderr, so stdout only carries the response)
_console: Optional[Console] = None

# Handlers installed by configure_logging, replaced on reconfiguration
_handlers: List[logging.Handler] = []


class ResponseCode(IntEnum):
    """Codes carried in the response envelope."""

    SUCCESS = 200
    EVENT_NOT_FOUND = 404
    INTERNAL_ERROR = 500


def get_console() -> Console:
    """
    Get the singleton Rich Console instance writing to stderr.

    Returns:
        Console: Rich Console instance for diagnostics
    """
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure root logging for a CLI run.

    Diagnostics go to stderr through Rich (WARNING, or INFO when verbose).
    When ``log_file`` is given, INFO and above are also appended to it.

    Args:
        verbose: Show INFO messages on stderr
        log_file: Optional file to append log records to
    """
    root = logging.getLogger()
    for handler in _handlers:
        root.removeHandler(handler)
        handler.close()
    _handlers.clear()

    console_level = logging.INFO if verbose else logging.WARNING
    console_handler = RichHandler(console=get_console(), show_path=False, rich_tracebacks=True)
    console_handler.setLevel(console_level)
    _handlers.append(console_handler)

    root_level = console_level
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        _handlers.append(file_handler)
        root_level = logging.INFO

    for handler in _handlers:
        root.addHandler(handler)
    root.setLevel(root_level)


def read_input(params: str) -> str:
    """
    Return the command input: ``params`` when given, otherwise stdin.

    An interactive terminal on stdin counts as no input.

    Args:
        params: Value of the --params option

    Returns:
        Input text, unchanged
    """
    if params:
        return params

    stdin = click.get_text_stream('stdin')
    if stdin.isatty():
        return ""
    return stdin.read()


def build_response(code: int, data: Any, message: str) -> Dict[str, Any]:
    """
    Build the response envelope.

    Example:
        >>> build_response(ResponseCode.SUCCESS, None, "success")
        {'code': 200, 'data': None, 'message': 'success'}
    """
    return {"code": int(code), "data": data, "message": message}


def emit(value: Any) -> None:
    """
    Write a value to stdout: strings as-is, anything else as JSON.

    Args:
        value: Value to write
    """
    if isinstance(value, str):
        click.echo(value)
    else:
        click.echo(json.dumps(value, ensure_ascii=False))


def transport_response(code: int, data: Any, message: str) -> None:
    """
    Write the response envelope to stdout as a single JSON line.

    Args:
        code: Response code
        data: Response payload
        message: Human-readable message
    """
    emit(build_response(code, data, message))


def extract_path(data: Any, path: str) -> Any:
    """
    Extract a value by JSONPath-like dotted path.

    Supports ``$``, ``$.a.b`` and bare ``a.b``; numeric segments index lists.

    Args:
        data: Parsed JSON value
        path: Path expression

    Returns:
        The value found at ``path``

    Raises:
        KeyError: If the path does not exist

    Example:
        >>> extract_path({"data": {"reply": "hi"}}, "$.data.reply")
        'hi'
        >>> extract_path({"items": [{"id": 1}]}, "items.0.id")
        1
    """
    expr = path.strip()
    if expr.startswith('$'):
        expr = expr[1:]
    expr = expr.lstrip('.')
    if not expr:
        return data

    current = data
    for key in expr.split('.'):
        if isinstance(current, dict) and key in current:
            current = current[key]
        elif isinstance(current, list) and key.isdigit() and int(key) < len(current):
            current = current[int(key)]
        else:
            raise KeyError(path)
    return current
