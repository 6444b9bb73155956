#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/tokenizer.py
"""BBCode tokenizer.

Turns BBCode markup into an element tree: a list of
:class:`~bbslate.elements.Element` and literal strings. The tokenizer knows
nothing about tag meaning; it only balances opening and closing tags.

Recognized syntax:

- ``[tag]`` ... ``[/tag]``
- ``[tag=value]``, stored as ``attrs[tag] = value``
- ``[tag key=value key2="quoted value"]``
- with escape tags enabled, ``\\[``, ``\\]`` and ``\\\\`` produce the literal
  character

Unbalanced markup is recovered, not rejected (unless ``strict_mode`` is set):
an opening tag that is never closed becomes an empty, ``void`` element and
whatever it would have contained follows it as siblings, and a closing tag with no open
counterpart is kept as literal text.

"""

from __future__ import annotations

import logging
import re
from typing import Collection, Optional

from bbslate.constants import ATTRIBUTE_PATTERN, ESCAPE_CHAR, TAG_PATTERN
from bbslate.elements import Element, ElementContent
from bbslate.exceptions import TokenizationError
from bbslate.options import TokenizerOptions

logger = logging.getLogger(__name__)

ESCAPE_PATTERN = re.compile(re.escape(ESCAPE_CHAR) + r"([\\\[\]])")


class BBCodeTokenizer:
    """Convert BBCode markup to an element tree.

    Parameters
    ----------
    options : TokenizerOptions or None, default = None
        Tokenizer configuration

    Examples
    --------
        >>> BBCodeTokenizer().tokenize("a [b]bold[/b]")
        ['a ', Element(tag='b', attrs={}, content=['bold'])]

    """

    def __init__(self, options: TokenizerOptions | None = None):
        """Initialize the tokenizer with options."""
        self.options = options or TokenizerOptions()

    def tokenize(self, markup: str) -> list[ElementContent]:
        """Tokenize ``markup`` into a list of elements and strings.

        Parameters
        ----------
        markup : str
            BBCode text

        Returns
        -------
        list of Element or str
            Top-level element tree. Adjacent strings are not merged.

        Raises
        ------
        TokenizationError
            If ``strict_mode`` is set and the markup has unbalanced tags

        """
        root = Element(tag="")
        stack: list[Element] = [root]
        positions: list[int] = [0]
        pos = 0

        while pos < len(markup):
            match = self._next_token(markup, pos)

            if match is None:
                stack[-1].content.append(markup[pos:])
                break

            if match.start() > pos:
                stack[-1].content.append(markup[pos : match.start()])
            pos = match.end()

            if match.re is ESCAPE_PATTERN:
                stack[-1].content.append(match.group(1))
                continue

            is_closing = match.group(1) == "/"
            tag_name = match.group(2) if self.options.case_sensitive else match.group(2).lower()

            if not self._is_allowed(tag_name):
                stack[-1].content.append(match.group(0))
                continue

            if not is_closing:
                element = Element(tag=tag_name, attrs=self._parse_attributes(tag_name, match), source=match.group(0))
                stack[-1].content.append(element)
                stack.append(element)
                positions.append(match.start())
                continue

            depth = self._find_open(stack, tag_name)
            if depth is None:
                if self.options.strict_mode:
                    raise TokenizationError(f"Unmatched closing tag [/{tag_name}]", position=match.start())
                logger.debug("Unmatched closing tag [/%s] at %d kept as text", tag_name, match.start())
                stack[-1].content.append(match.group(0))
                continue

            while len(stack) - 1 > depth:
                self._void_top(stack, positions)
            stack.pop().closing_source = match.group(0)
            positions.pop()

        while len(stack) > 1:
            self._void_top(stack, positions)

        return root.content

    def _next_token(self, markup: str, pos: int) -> Optional[re.Match[str]]:
        """Return the earliest tag or escape sequence at or after ``pos``."""
        tag_match = TAG_PATTERN.search(markup, pos)
        if not self.options.enable_escape_tags:
            return tag_match

        escape_match = ESCAPE_PATTERN.search(markup, pos)
        if tag_match is None:
            return escape_match
        if escape_match is None or tag_match.start() < escape_match.start():
            return tag_match
        return escape_match

    def _is_allowed(self, tag_name: str) -> bool:
        allowed = self.options.allowed_tags
        return allowed is None or tag_name in allowed

    @staticmethod
    def _find_open(stack: list[Element], tag_name: str) -> Optional[int]:
        """Return the stack index of the innermost open element named ``tag_name``."""
        for depth in range(len(stack) - 1, 0, -1):
            if stack[depth].tag == tag_name:
                return depth
        return None

    def _void_top(self, stack: list[Element], positions: list[int]) -> None:
        """Close the innermost open element as an empty one, hoisting its content."""
        element = stack.pop()
        position = positions.pop()
        if self.options.strict_mode:
            raise TokenizationError(f"Unclosed [{element.tag}] tag", position=position)
        logger.debug("Unclosed [%s] tag at %d treated as void", element.tag, position)
        stack[-1].content.extend(element.content)
        element.content = []
        element.void = True

    @staticmethod
    def _parse_attributes(tag_name: str, match: re.Match[str]) -> dict[str, str]:
        """Extract attributes from an opening tag match."""
        value = match.group(3)
        if value is not None:
            return {tag_name: _unquote(value.strip())}

        attrs: dict[str, str] = {}
        for attr in ATTRIBUTE_PATTERN.finditer(match.group(4) or ""):
            key, double_quoted, single_quoted, bare = attr.groups()
            if double_quoted is not None:
                attrs[key] = double_quoted
            elif single_quoted is not None:
                attrs[key] = single_quoted
            else:
                attrs[key] = bare
        return attrs


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def tokenize(
    markup: str,
    allowed_tags: Collection[str] | None = None,
    enable_escape_tags: bool = False,
    strict_mode: bool = False,
    case_sensitive: bool = False,
) -> list[ElementContent]:
    """Tokenize BBCode markup into an element tree.

    Convenience wrapper around :class:`BBCodeTokenizer`.

    Parameters
    ----------
    markup : str
        BBCode text
    allowed_tags : collection of str or None, default None
        Tags to recognize; others stay literal text. ``None`` allows all.
    enable_escape_tags : bool, default False
        Resolve ``\\[``, ``\\]`` and ``\\\\`` escapes
    strict_mode : bool, default False
        Raise on unbalanced tags
    case_sensitive : bool, default False
        Keep tag name case

    Returns
    -------
    list of Element or str
        Element tree

    """
    options = TokenizerOptions(
        allowed_tags=allowed_tags,  # type: ignore[arg-type]
        enable_escape_tags=enable_escape_tags,
        strict_mode=strict_mode,
        case_sensitive=case_sensitive,
    )
    return BBCodeTokenizer(options).tokenize(markup)
