#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/elements.py
"""BBCode element tree produced by the tokenizer.

An element tree is a list whose entries are either :class:`Element` instances
(a tag with attributes and ordered content) or plain strings (literal text).
Rules receive these entries during deserialization.

"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Union


@dataclass
class Element:
    """A tagged node of the markup tree.

    Parameters
    ----------
    tag : str
        Tag name (e.g., 'b', 'url', 'quote')
    attrs : dict, default = empty dict
        Tag attributes. A ``[tag=value]`` shorthand is stored under the tag's
        own name, so ``[url=http://x]`` has ``attrs == {"url": "http://x"}``.
    content : list of Element or str, default = empty list
        Ordered children
    void : bool, default False
        True for an opening tag the markup never closed. A void element has
        no content and no closing tag.
    source : str, optional
        Opening tag exactly as written in the markup
    closing_source : str, optional
        Closing tag exactly as written in the markup

    """

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    content: list[ElementContent] = field(default_factory=list)
    void: bool = field(default=False, compare=False, repr=False)
    source: Optional[str] = field(default=None, compare=False, repr=False)
    closing_source: Optional[str] = field(default=None, compare=False, repr=False)

    @property
    def value(self) -> str | None:
        """Return the ``[tag=value]`` shorthand value, if present."""
        return self.attrs.get(self.tag)

    def opening_tag(self) -> str:
        """Render the opening tag as it would appear in markup.

        Tags read from markup are returned as written; others are rebuilt
        from ``tag`` and ``attrs``.

        Examples
        --------
            >>> Element("url", {"url": "http://x"}).opening_tag()
            '[url=http://x]'
            >>> Element("img", {"width": "10"}).opening_tag()
            '[img width=10]'

        """
        if self.source is not None:
            return self.source

        value = self.value
        parts = [self.tag if value is None else f"{self.tag}={value}"]
        for key, val in self.attrs.items():
            if key == self.tag:
                continue
            if not val or any(ch.isspace() for ch in val):
                parts.append(f'{key}="{val}"')
            else:
                parts.append(f"{key}={val}")
        return f"[{' '.join(parts)}]"

    def closing_tag(self) -> str:
        """Render the closing tag, or an empty string for a void element."""
        if self.void:
            return ""
        if self.closing_source is not None:
            return self.closing_source
        return f"[/{self.tag}]"

    def text_content(self) -> str:
        """Return the concatenated literal text of this element's subtree."""
        return "".join(entry if isinstance(entry, str) else entry.text_content() for entry in self.content)


ElementContent = Union[Element, str]


def merge_text(content: Sequence[ElementContent]) -> list[ElementContent]:
    """Merge adjacent literal strings at every nesting level.

    Returns a new list; neither ``content`` nor any element in it is modified.
    The tokenizer can split one run of text into several strings (around
    escape sequences, for instance), which rules would otherwise see as
    separate text nodes.

    Parameters
    ----------
    content : sequence of Element or str
        Element tree to normalize

    Returns
    -------
    list of Element or str
        Normalized tree where no two adjacent entries are both strings

    Examples
    --------
        >>> merge_text(["a", "b", Element("b", content=["c", "d"]), "e"])
        ['ab', Element(tag='b', attrs={}, content=['cd']), 'e']

    """
    merged: list[ElementContent] = []
    for entry in content:
        if isinstance(entry, str):
            if merged and isinstance(merged[-1], str):
                merged[-1] += entry
            else:
                merged.append(entry)
        else:
            merged.append(replace(entry, attrs=dict(entry.attrs), content=merge_text(entry.content)))
    return merged
