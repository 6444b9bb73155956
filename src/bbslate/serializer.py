#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/serializer.py
"""Document tree to BBCode conversion.

Serialization is a post-order walk. Text leaves are escaped, then each of
their marks is rendered around the result in order. Blocks and inlines are
rendered from the concatenation of their rendered children. Every block,
inline and mark must be claimed by some rule; nothing is dropped silently.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from bbslate.exceptions import SerializationError, UnmatchedMarkSerializationError, UnmatchedNodeSerializationError
from bbslate.nodes import Container, Mark, Node, StringCarrier, Text, Value
from bbslate.options import SerializeOptions
from bbslate.serialization import value_from_dict

logger = logging.getLogger(__name__)


class Serializer:
    """Convert a document :class:`~bbslate.nodes.Value` to BBCode.

    Parameters
    ----------
    rules : sequence of rules
        Rule chain, in precedence order

    """

    def __init__(self, rules: Sequence[Any]):
        """Initialize the serializer with its rule chain."""
        self.rules = tuple(rules)

    def serialize(self, value: Union[Value, Mapping[str, Any]], options: SerializeOptions | None = None) -> str:
        """Serialize a document value to markup.

        Parameters
        ----------
        value : Value or dict
            Document tree, or its Slate JSON dict form
        options : SerializeOptions or None, default None
            Output options

        Returns
        -------
        str
            BBCode markup

        Raises
        ------
        UnmatchedNodeSerializationError
            If no rule renders a block, inline or leaf string
        UnmatchedMarkSerializationError
            If no rule renders a mark
        SerializationError
            If the document nests deeper than the recursion limit allows

        """
        options = options or SerializeOptions()
        try:
            if isinstance(value, Mapping):
                value = value_from_dict(value)
            output = options.block_separator.join(self.serialize_node(node) for node in value.document.nodes)
        except RecursionError as e:
            raise SerializationError("Document is nested too deeply to serialize", original_error=e) from e
        return output.strip() if options.strip else output

    def serialize_node(self, node: Node) -> str:
        """Serialize a single node and its descendants."""
        if isinstance(node, Text):
            return self.serialize_text(node)

        children = "".join(self.serialize_node(child) for child in node.nodes)
        rendered = self._dispatch(node, children)
        if rendered is None:
            raise UnmatchedNodeSerializationError(getattr(node, "type", type(node).__name__))
        return rendered

    def serialize_text(self, node: Text) -> str:
        """Escape a text leaf and render its marks around it, innermost first."""
        rendered = self.serialize_string(StringCarrier(text=node.text))
        for mark in node.marks:
            rendered = self.serialize_mark(mark, rendered)
        return rendered

    def serialize_mark(self, mark: Mark, children: str) -> str:
        """Render one mark around already-rendered text."""
        rendered = self._dispatch(mark, children)
        if rendered is None:
            raise UnmatchedMarkSerializationError(mark.type)
        return rendered

    def serialize_string(self, string: StringCarrier) -> str:
        """Escape leaf text through the rule chain."""
        rendered = self._dispatch(string, string.text)
        if rendered is None:
            raise UnmatchedNodeSerializationError(string.object)
        return rendered

    def _dispatch(self, obj: Union[Container, Mark, StringCarrier], children: str) -> Optional[str]:
        """Return the first rule's rendering of ``obj``, or None if no rule claims it."""
        for rule in self.rules:
            transform = getattr(rule, "serialize", None)
            if transform is None:
                continue
            rendered = transform(obj, children)
            if rendered is not None:
                return rendered
        logger.debug("No rule claimed %s %r", obj.object, getattr(obj, "type", None))
        return None
