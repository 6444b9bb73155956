#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/deserializer.py
"""BBCode to document tree conversion.

The deserializer tokenizes markup, merges adjacent text, and walks the element
tree, asking each rule in turn to convert every element. Elements no rule
claims are kept as literal text: ``[tag]``, the converted content, ``[/tag]``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Collection, Mapping, Optional, Sequence

from bbslate.constants import OBJECT_BLOCK
from bbslate.elements import Element, ElementContent, merge_text
from bbslate.exceptions import DeserializationError, InvalidContinuationArgumentError
from bbslate.marks import apply_mark
from bbslate.nodes import Block, Container, Document, Node, PendingMark, Text, Value
from bbslate.options import DeserializeOptions
from bbslate.rules import Suppressed, Unhandled, coerce_result
from bbslate.serialization import mark_from_dict, node_from_dict
from bbslate.tokenizer import tokenize

logger = logging.getLogger(__name__)

Tokenizer = Callable[..., list[ElementContent]]


def _tag_of(element: Any) -> Optional[str]:
    return element.tag if isinstance(element, Element) else None


class Deserializer:
    """Convert BBCode markup to a document :class:`~bbslate.nodes.Value`.

    Parameters
    ----------
    rules : sequence of rules
        Rule chain, in precedence order
    allowed_tags : collection of str or None, default None
        Tags the tokenizer recognizes; ``None`` recognizes all
    tokenizer : callable, optional
        ``tokenize(markup, allowed_tags=..., enable_escape_tags=...)``;
        defaults to :func:`bbslate.tokenizer.tokenize`

    """

    def __init__(
        self,
        rules: Sequence[Any],
        allowed_tags: Collection[str] | None = None,
        tokenizer: Tokenizer | None = None,
    ):
        """Initialize the deserializer with its rule chain."""
        self.rules = tuple(rules)
        self.allowed_tags = frozenset(allowed_tags) if allowed_tags is not None else None
        self.tokenizer = tokenizer or tokenize

    def deserialize(self, markup: str, options: DeserializeOptions | None = None) -> Value:
        """Convert markup to a document value.

        Parameters
        ----------
        markup : str
            BBCode text
        options : DeserializeOptions or None, default None
            ``type="block"`` (the default) keeps only top-level blocks; any
            other type keeps only top-level non-block nodes

        Returns
        -------
        Value
            The document tree

        Raises
        ------
        InvalidContinuationArgumentError
            If a rule calls ``next_`` with an invalid argument
        InvalidRuleResultError
            If a rule returns an invalid value
        DeserializationError
            If the markup nests deeper than the recursion limit allows

        """
        options = options or DeserializeOptions()

        elements = self.tokenizer(markup, allowed_tags=self.allowed_tags, enable_escape_tags=True)
        try:
            nodes = self.deserialize_elements(merge_text(elements))
        except RecursionError as e:
            raise DeserializationError("Markup is nested too deeply to deserialize", original_error=e) from e

        if options.type == OBJECT_BLOCK:
            nodes = [node for node in nodes if isinstance(node, Block)]
        else:
            nodes = [node for node in nodes if not isinstance(node, Block)]

        return Value(document=Document(nodes=nodes, data={}))

    def deserialize_elements(self, elements: Sequence[ElementContent]) -> list[Node]:
        """Deserialize a sequence of elements into a flat list of nodes."""
        nodes: list[Node] = []
        for element in elements:
            nodes.extend(self.deserialize_element(element))
        return nodes

    def deserialize_element(self, element: ElementContent) -> list[Node]:
        """Deserialize one element through the rule chain.

        Returns
        -------
        list of Node
            The nodes produced for ``element``; empty when a rule suppressed it

        """
        tag = _tag_of(element)

        def next_(children: Any = None) -> list[Node]:
            if children is None:
                return []
            if isinstance(children, (Element, str)):
                return self.deserialize_element(children)
            if isinstance(children, (list, tuple)) and all(isinstance(c, (Element, str)) for c in children):
                return self.deserialize_elements(children)
            raise InvalidContinuationArgumentError(children, tag=tag)

        for rule in self.rules:
            transform = getattr(rule, "deserialize", None)
            if transform is None:
                continue

            result = coerce_result(transform(element, next_), rule, tag=tag)
            if isinstance(result, Unhandled):
                continue
            if isinstance(result, Suppressed):
                logger.debug("Rule %r suppressed [%s]", rule, tag)
                return []
            if result.value is None:
                return next_(element.content) if isinstance(element, Element) else []
            return self._materialize(result.value)

        return self._deserialize_literally(element, next_)

    def _deserialize_literally(self, element: ElementContent, next_: Callable[[Any], list[Node]]) -> list[Node]:
        """Keep an unclaimed element as its tags, as written, around its content.

        A void element has no closing tag, so none is added.
        """
        if isinstance(element, str):
            logger.warning("No deserializer found for literal text. Deserializing verbatim")
            return [Text(text=element)]

        logger.warning('No deserializer found for "%s". Deserializing literally', element.tag)
        nodes = [Text(text=element.opening_tag()), *next_(element.content)]
        closing = element.closing_tag()
        if closing:
            nodes.append(Text(text=closing))
        return nodes

    def _materialize(self, value: Any) -> list[Node]:
        """Turn a matched rule result into finished nodes.

        Dicts are converted, pending marks are distributed onto their text
        leaves, and missing structural fields are given empty defaults.
        """
        if isinstance(value, Mapping):
            value = node_from_dict(value, allow_pending=True)

        if isinstance(value, (list, tuple)):
            nodes: list[Node] = []
            for item in value:
                nodes.extend(self._materialize(item))
            return nodes

        if isinstance(value, PendingMark):
            children = self._materialize(value.nodes or [])
            return apply_mark(replace(value, data=value.data or {}, nodes=children))

        if isinstance(value, Container):
            return [replace(value, data=value.data or {}, nodes=self._materialize(value.nodes or []))]

        if isinstance(value, Text):
            marks = [mark_from_dict(mark) if isinstance(mark, Mapping) else mark for mark in value.marks or []]
            return [replace(value, text=value.text or "", marks=marks)]

        return [value]
