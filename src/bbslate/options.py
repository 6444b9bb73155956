#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/options.py
"""Configuration options for tokenizing, deserializing and serializing.

All options classes are frozen dataclasses; use ``create_updated`` to derive a
modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Optional

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from bbslate.constants import (
    DEFAULT_BLOCK_SEPARATOR,
    DEFAULT_DESERIALIZE_TYPE,
    DEFAULT_ENABLE_ESCAPE_TAGS,
    DEFAULT_STRIP_OUTPUT,
    DEFAULT_TAGS_CASE_SENSITIVE,
    DEFAULT_TOKENIZER_STRICT_MODE,
)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class DeserializeOptions(CloneFrozenMixin):
    """Options for converting markup into a document tree.

    Parameters
    ----------
    type : str, default "block"
        Which top-level nodes to keep. ``"block"`` keeps only block nodes;
        any other value keeps only the non-block nodes (inlines and text).

    """

    type: str = field(
        default=DEFAULT_DESERIALIZE_TYPE,
        metadata={"help": "Top-level node kind to keep ('block' or anything else)", "importance": "core"},
    )

    def __post_init__(self) -> None:
        """Validate field types.

        Raises
        ------
        TypeError
            If ``type`` is not a string.

        """
        if not isinstance(self.type, str):
            raise TypeError(f"type must be a string, got {type(self.type).__name__}")


@dataclass(frozen=True)
class SerializeOptions(CloneFrozenMixin):
    """Options for rendering a document tree back to markup.

    Parameters
    ----------
    block_separator : str, default "\\n"
        String placed between serialized top-level nodes
    strip : bool, default True
        Whether to strip leading and trailing whitespace from the result

    """

    block_separator: str = field(
        default=DEFAULT_BLOCK_SEPARATOR,
        metadata={"help": "Separator between top-level nodes", "importance": "advanced"},
    )
    strip: bool = field(
        default=DEFAULT_STRIP_OUTPUT,
        metadata={"help": "Strip surrounding whitespace from the output", "importance": "advanced"},
    )


@dataclass(frozen=True)
class TokenizerOptions(CloneFrozenMixin):
    """Options for the BBCode tokenizer.

    Parameters
    ----------
    allowed_tags : frozenset of str or None, default None
        Tag names recognized as markup. ``None`` recognizes every tag; tags
        outside the set are kept as literal text.
    enable_escape_tags : bool, default False
        Whether ``\\[``, ``\\]`` and ``\\\\`` are resolved to the literal character.
    strict_mode : bool, default False
        Raise ``TokenizationError`` on unbalanced tags instead of recovering.
    case_sensitive : bool, default False
        Keep tag names as written instead of lower-casing them.

    """

    allowed_tags: Optional[FrozenSet[str]] = field(
        default=None,
        metadata={"help": "Tag names to recognize (default: all)", "importance": "core"},
    )
    enable_escape_tags: bool = field(
        default=DEFAULT_ENABLE_ESCAPE_TAGS,
        metadata={"help": "Resolve backslash escapes of brackets and backslashes", "importance": "core"},
    )
    strict_mode: bool = field(
        default=DEFAULT_TOKENIZER_STRICT_MODE,
        metadata={"help": "Raise errors on unbalanced tags", "importance": "advanced"},
    )
    case_sensitive: bool = field(
        default=DEFAULT_TAGS_CASE_SENSITIVE,
        metadata={"help": "Keep tag name case", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Normalize the allow-list to a frozenset of tag names.

        Raises
        ------
        TypeError
            If ``allowed_tags`` is a bare string.

        """
        if self.allowed_tags is None:
            return
        if isinstance(self.allowed_tags, str):
            raise TypeError("allowed_tags must be a collection of tag names, not a string")
        tags = frozenset(self.allowed_tags)
        if not self.case_sensitive:
            tags = frozenset(tag.lower() for tag in tags)
        object.__setattr__(self, "allowed_tags", tags)
