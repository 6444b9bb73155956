#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/rules.py
"""Conversion rules and the rule chain result type.

A rule is any object exposing one or both of:

``deserialize(element, next_)``
    Convert an :class:`~bbslate.elements.Element` (or a literal string) into
    document nodes. ``next_`` deserializes child content through the same
    chain and always returns a flat list of nodes. The rule returns one of:

    - a node, a :class:`~bbslate.nodes.PendingMark`, a Slate node dict, or a
      list of these: the element is converted (same as ``Matched(value)``);
    - ``SUPPRESSED``: the element is dropped without a literal fallback;
    - ``None`` or ``UNHANDLED``: the next rule is tried;
    - ``Matched(None)``: the element is claimed but not wrapped; its content
      is deserialized in its place.

``serialize(obj, children)``
    Render a block, inline, mark or :class:`~bbslate.nodes.StringCarrier`,
    given the already-rendered children. Returns a string, or ``None`` when the
    rule does not handle ``obj``.

Rules are tried in chain order and the first one that handles the input wins.

Examples
--------
A rule set for bold text and paragraphs:

    >>> bold = TagRule(
    ...     tags={"b"},
    ...     types={"bold"},
    ...     deserialize=lambda el, next_: PendingMark("bold", nodes=next_(el.content)),
    ...     serialize=lambda mark, children: f"[b]{children}[/b]",
    ... )

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Collection, Mapping, Optional, Sequence, Union

from bbslate.elements import Element, ElementContent
from bbslate.exceptions import InvalidRuleResultError
from bbslate.nodes import Container, Mark, Node, PendingMark, StringCarrier, Text
from bbslate.utils.escape import escape_bbcode

Continuation = Callable[[Union[ElementContent, Sequence[ElementContent], None]], list[Node]]
Serializable = Union[Container, Mark, StringCarrier]


class Unhandled:
    """Result type of a rule that does not apply to its input."""

    def __repr__(self) -> str:
        return "UNHANDLED"


class Suppressed:
    """Result type of a rule that drops its input entirely."""

    def __repr__(self) -> str:
        return "SUPPRESSED"


UNHANDLED = Unhandled()
SUPPRESSED = Suppressed()


@dataclass(frozen=True)
class Matched:
    """Result of a rule that converted its input.

    Parameters
    ----------
    value : node, PendingMark, dict, list of these, or None
        The conversion result. ``None`` means "claimed, but deserialize the
        element's content in its place".

    """

    value: Any = None


RuleResult = Union[Matched, Suppressed, Unhandled]


def is_node_like(value: Any) -> bool:
    """Return True if ``value`` is something a deserialize rule may produce."""
    if isinstance(value, (Container, Text, PendingMark, Mapping)):
        return True
    if isinstance(value, (list, tuple)):
        return all(is_node_like(item) for item in value)
    return False


def coerce_result(raw: Any, rule: Any, tag: str | None = None) -> RuleResult:
    """Normalize a deserialize rule's return value to a :data:`RuleResult`.

    Raises
    ------
    InvalidRuleResultError
        If ``raw`` is not a node-like value, a result type, or None

    """
    if raw is None:
        return UNHANDLED
    if isinstance(raw, (Unhandled, Suppressed)):
        return raw
    if isinstance(raw, Matched):
        if raw.value is not None and not is_node_like(raw.value):
            raise InvalidRuleResultError(raw.value, rule, tag=tag)
        return raw
    if is_node_like(raw):
        return Matched(raw)
    raise InvalidRuleResultError(raw, rule, tag=tag)


class Rule:
    """Base class for rules; both transforms default to "not handled".

    Subclasses override :meth:`deserialize`, :meth:`serialize`, or both.
    """

    def deserialize(self, element: ElementContent, next_: Continuation) -> Any:
        """Convert ``element`` to document nodes, or return None to pass."""
        return None

    def serialize(self, obj: Serializable, children: str) -> Optional[str]:
        """Render ``obj`` to markup, or return None to pass."""
        return None


class TagRule(Rule):
    """A rule made of a predicate and a pair of transforms.

    The deserialize transform runs only for elements whose tag is in ``tags``;
    the serialize transform runs only for blocks, inlines and marks whose
    ``type`` is in ``types``.

    Parameters
    ----------
    tags : collection of str
        Element tags this rule deserializes
    types : collection of str
        Node and mark types this rule serializes
    deserialize : callable, optional
        ``(element, next_) -> result``
    serialize : callable, optional
        ``(obj, children) -> str``

    """

    def __init__(
        self,
        tags: Collection[str] = (),
        types: Collection[str] = (),
        deserialize: Callable[[Element, Continuation], Any] | None = None,
        serialize: Callable[[Serializable, str], Optional[str]] | None = None,
    ):
        """Initialize the rule with its predicates and transforms."""
        self.tags = frozenset(tags)
        self.types = frozenset(types)
        self._deserialize = deserialize
        self._serialize = serialize

    def __repr__(self) -> str:
        return f"TagRule(tags={sorted(self.tags)}, types={sorted(self.types)})"

    def deserialize(self, element: ElementContent, next_: Continuation) -> Any:
        """Apply the deserialize transform to elements with a matching tag."""
        if self._deserialize is None or not isinstance(element, Element) or element.tag not in self.tags:
            return None
        return self._deserialize(element, next_)

    def serialize(self, obj: Serializable, children: str) -> Optional[str]:
        """Apply the serialize transform to blocks, inlines and marks with a matching type."""
        if self._serialize is None or isinstance(obj, StringCarrier) or obj.type not in self.types:
            return None
        return self._serialize(obj, children)


class EscapingRule(Rule):
    """Built-in rule for literal text, always first in the chain.

    Literal strings from the element tree become text leaves verbatim (the
    tokenizer has already resolved escape sequences). Leaf text is escaped on
    the way out with :func:`~bbslate.utils.escape.escape_bbcode`.
    """

    def deserialize(self, element: ElementContent, next_: Continuation) -> Any:
        """Turn a literal string into a text leaf."""
        if isinstance(element, str):
            return Text(text=element)
        return None

    def serialize(self, obj: Serializable, children: str) -> Optional[str]:
        """Escape leaf text."""
        if isinstance(obj, StringCarrier):
            return escape_bbcode(children)
        return None
