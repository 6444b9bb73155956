#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/utils/escape.py
"""BBCode text escaping utilities."""

from __future__ import annotations

from bbslate.constants import BACKSLASH_PATTERN, BRACKET_PATTERN


def escape_bbcode(text: str) -> str:
    r"""Escape backslashes and square brackets in BBCode text content.

    Backslashes are doubled first, then every ``[`` and ``]`` is prefixed with
    a backslash, so the backslashes added for brackets are never doubled.

    Parameters
    ----------
    text : str
        Text to escape

    Returns
    -------
    str
        Escaped text safe for BBCode

    Examples
    --------
        >>> escape_bbcode("a[b]c\\d")
        'a\\[b\\]c\\\\d'

    """
    if not text:
        return text

    text = BACKSLASH_PATTERN.sub(r"\\\1", text)
    return BRACKET_PATTERN.sub(r"\\\1", text)
