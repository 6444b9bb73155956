"""Command-line interface for the bbslate transducer.

Rules are not built in: pass ``--rules module:attribute`` naming a sequence of
rules (or a zero-argument callable returning one).

Examples
--------
BBCode to Slate JSON:
    $ bbslate deserialize post.bbcode --rules myforum.rules:RULES --indent 2

Slate JSON back to BBCode:
    $ bbslate serialize post.json --rules myforum.rules:RULES --out post.bbcode

Read from stdin, keep top-level inline nodes:
    $ echo "[b]hi[/b]" | bbslate deserialize --rules myforum.rules:RULES --type inline
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from bbslate.constants import (
    EXIT_ERROR,
    EXIT_FILE_ERROR,
    EXIT_PARSING_ERROR,
    EXIT_RENDERING_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERROR,
)
from bbslate.exceptions import (
    BBSlateError,
    DeserializationError,
    NodeFormatError,
    SerializationError,
    TokenizationError,
)
from bbslate.logging_utils import configure_logging
from bbslate.serialization import value_from_json, value_to_json
from bbslate.transducer import BBCodeTransducer

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="bbslate",
        description="Convert between BBCode markup and Slate document JSON.",
    )
    parser.add_argument("command", choices=["deserialize", "serialize"], help="Conversion direction")
    parser.add_argument("input", nargs="?", default="-", help="Input file (default: stdin)")
    parser.add_argument("--rules", required=True, help="Rule set to load, as 'module:attribute'")
    parser.add_argument("--out", "-o", help="Output file (default: stdout)")
    parser.add_argument(
        "--type",
        default="block",
        help="Top-level nodes to keep when deserializing: 'block' or anything else for non-blocks",
    )
    parser.add_argument("--allowed-tags", help="Comma-separated tags to recognize (default: all)")
    parser.add_argument("--indent", type=int, default=None, help="JSON indentation when deserializing")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    return parser


def load_rules(reference: str) -> list[Any]:
    """Import a rule set from a ``module:attribute`` reference.

    Parameters
    ----------
    reference : str
        Reference such as ``"myforum.rules:RULES"``

    Returns
    -------
    list
        The rules, in precedence order

    Raises
    ------
    ValueError
        If ``reference`` is malformed or does not name a sequence of rules
    ImportError
        If the module cannot be imported
    AttributeError
        If the module has no such attribute

    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"Rules must be given as 'module:attribute', got {reference!r}")

    target = getattr(importlib.import_module(module_name), attribute)
    if callable(target):
        try:
            target = target()
        except TypeError as e:
            raise ValueError(f"{reference} could not be called without arguments: {e}") from e
    if isinstance(target, (str, bytes)) or not isinstance(target, Sequence):
        raise ValueError(f"{reference} is not a sequence of rules")
    return list(target)


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level)
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _write_output(text: str, path: str | None) -> None:
    if path is None:
        sys.stdout.write(text + "\n")
    else:
        Path(path).write_text(text, encoding="utf-8")


def main(args: list[str] | None = None) -> int:
    """Run the CLI and return its exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    _setup_logging_level(parsed_args)

    try:
        rules = load_rules(parsed_args.rules)
    except (ImportError, AttributeError, ValueError) as e:
        print(f"Error: could not load rules: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    allowed_tags = None
    if parsed_args.allowed_tags:
        allowed_tags = [tag.strip() for tag in parsed_args.allowed_tags.split(",") if tag.strip()]

    try:
        source = _read_input(parsed_args.input)
    except OSError as e:
        print(f"Error: could not read {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    transducer = BBCodeTransducer(rules, allowed_tags=allowed_tags)

    try:
        if parsed_args.command == "deserialize":
            output = value_to_json(transducer.deserialize(source, type=parsed_args.type), indent=parsed_args.indent)
        else:
            output = transducer.serialize(value_from_json(source))
    except (DeserializationError, TokenizationError, NodeFormatError) as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_PARSING_ERROR
    except SerializationError as e:
        logger.debug("Conversion failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RENDERING_ERROR
    except BBSlateError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        _write_output(output, parsed_args.out)
    except OSError as e:
        print(f"Error: could not write {parsed_args.out}: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
