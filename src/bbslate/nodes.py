#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/nodes.py
"""Document tree node classes.

The document tree mirrors the Slate editor's JSON model: a :class:`Value`
wraps a :class:`Document`, whose ``nodes`` are blocks, inlines and text
leaves. Formatting such as bold or italic is not a node of its own; it is a
:class:`Mark` attached to every text leaf it covers.

Node Hierarchy
--------------
Permanent nodes (the ``Node`` union):
    - Block: structural container (paragraph, quote, list item, ...)
    - Inline: container inside a block (link, mention, ...)
    - Text: leaf holding a string and its marks

Transient nodes:
    - PendingMark: returned by a deserialize rule to decorate the nodes it
      wraps. The deserializer distributes it onto text leaves and it never
      appears in a finished document.
    - StringCarrier: the raw leaf text handed to the escaping rule while
      serializing.

Every class exposes a read-only ``object`` discriminator matching the Slate
JSON ``"object"`` key.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from bbslate.constants import (
    OBJECT_BLOCK,
    OBJECT_DOCUMENT,
    OBJECT_INLINE,
    OBJECT_MARK,
    OBJECT_STRING,
    OBJECT_TEXT,
    OBJECT_VALUE,
    ObjectKind,
)


@dataclass
class Mark:
    """A decoration attached to a text leaf.

    Parameters
    ----------
    type : str
        Mark type (e.g., 'bold', 'color')
    data : dict, default = empty dict
        Mark attributes (e.g., the color value)

    """

    object: ClassVar[ObjectKind] = OBJECT_MARK

    type: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the Slate JSON representation."""
        return {"object": self.object, "type": self.type, "data": self.data}


@dataclass
class Text:
    """Text leaf.

    Parameters
    ----------
    text : str, default ""
        Leaf text, unescaped
    marks : list of Mark, default = empty list
        Decorations in application order (innermost first)

    """

    object: ClassVar[ObjectKind] = OBJECT_TEXT

    text: str = ""
    marks: list[Mark] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the Slate JSON representation."""
        return {"object": self.object, "text": self.text, "marks": [mark.to_dict() for mark in self.marks]}


@dataclass
class Container:
    """Base class for nodes holding child nodes.

    Parameters
    ----------
    type : str
        Node type (e.g., 'paragraph', 'link')
    data : dict, default = empty dict
        Node attributes
    nodes : list of Node, default = empty list
        Child nodes

    """

    object: ClassVar[ObjectKind]

    type: str
    data: dict[str, Any] = field(default_factory=dict)
    nodes: list[Node] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the Slate JSON representation."""
        return {
            "object": self.object,
            "type": self.type,
            "data": self.data,
            "nodes": [node.to_dict() for node in self.nodes],
        }


@dataclass
class Block(Container):
    """Block-level container node (paragraph, quote, list item, ...)."""

    object: ClassVar[ObjectKind] = OBJECT_BLOCK


@dataclass
class Inline(Container):
    """Inline container node (link, mention, ...)."""

    object: ClassVar[ObjectKind] = OBJECT_INLINE


Node = Union[Block, Inline, Text]


@dataclass
class PendingMark:
    """Transient mark wrapping the nodes it decorates.

    Only valid as the return value of a deserialize rule. It is not part of
    the ``Node`` union: the deserializer replaces it by its ``nodes``, each
    text leaf among them carrying a new :class:`Mark`.

    Parameters
    ----------
    type : str
        Mark type
    data : dict, default = empty dict
        Mark attributes
    nodes : list of Node or PendingMark, default = empty list
        Decorated content

    """

    object: ClassVar[ObjectKind] = OBJECT_MARK

    type: str
    data: dict[str, Any] = field(default_factory=dict)
    nodes: list[Union[Node, PendingMark]] = field(default_factory=list)

    def to_mark(self) -> Mark:
        """Return the leaf decoration this pending mark applies."""
        return Mark(type=self.type, data=self.data)


@dataclass(frozen=True)
class StringCarrier:
    """Leaf text passed through the rule chain for escaping."""

    object: ClassVar[ObjectKind] = OBJECT_STRING

    text: str = ""


@dataclass
class Document:
    """Root of the document tree.

    Parameters
    ----------
    nodes : list of Node, default = empty list
        Top-level nodes
    data : dict, default = empty dict
        Document attributes

    """

    object: ClassVar[ObjectKind] = OBJECT_DOCUMENT

    nodes: list[Node] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the Slate JSON representation."""
        return {"object": self.object, "data": self.data, "nodes": [node.to_dict() for node in self.nodes]}


@dataclass
class Value:
    """Top-level container returned by deserialization and consumed by serialization."""

    object: ClassVar[ObjectKind] = OBJECT_VALUE

    document: Document = field(default_factory=Document)

    def to_dict(self) -> dict[str, Any]:
        """Return the Slate JSON representation."""
        return {"object": self.object, "document": self.document.to_dict()}
