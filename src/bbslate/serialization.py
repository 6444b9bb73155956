#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/serialization.py
"""Slate JSON conversion for document trees.

Converts :class:`~bbslate.nodes.Value` trees to and from the plain
dict/JSON shape used by the Slate editor::

    {"object": "value",
     "document": {"object": "document", "data": {}, "nodes": [...]}}

Missing or null ``data``/``nodes``/``text``/``marks`` fields are filled in with
empty defaults when reading.

Examples
--------
    >>> from bbslate.nodes import Block, Container, Document, Text, Value
    >>> value = Value(Document(nodes=[Block("paragraph", nodes=[Text("hi")])]))
    >>> value_from_json(value_to_json(value)) == value
    True

"""

from __future__ import annotations

import json
from typing import Any, Mapping, Union

from bbslate.constants import (
    OBJECT_BLOCK,
    OBJECT_DOCUMENT,
    OBJECT_INLINE,
    OBJECT_MARK,
    OBJECT_TEXT,
    OBJECT_VALUE,
)
from bbslate.exceptions import NodeFormatError
from bbslate.nodes import Block, Container, Document, Inline, Mark, Node, PendingMark, Text, Value


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise NodeFormatError(f"Expected a {what} object, got {type(payload).__name__}", payload=payload)
    return payload


def _data_of(payload: Mapping[str, Any]) -> dict[str, Any]:
    data = payload.get("data")
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise NodeFormatError(f"'data' must be an object, got {type(data).__name__}", payload=payload)
    return dict(data)


def mark_from_dict(payload: Any) -> Mark:
    """Convert a Slate mark dict to a :class:`Mark`.

    Raises
    ------
    NodeFormatError
        If the payload is not a mark object or has no ``type``

    """
    payload = _require_mapping(payload, "mark")
    if payload.get("object", OBJECT_MARK) != OBJECT_MARK or "type" not in payload:
        raise NodeFormatError("Invalid mark object", payload=payload)
    return Mark(type=payload["type"], data=_data_of(payload))


def _child_from(payload: Any, allow_pending: bool) -> Union[Node, PendingMark]:
    if allow_pending and isinstance(payload, (Container, Text, PendingMark)):
        return payload
    return node_from_dict(payload, allow_pending=allow_pending)


def node_from_dict(payload: Any, allow_pending: bool = False) -> Union[Node, PendingMark]:
    """Convert a Slate node dict to a node instance.

    With ``allow_pending`` set, the dict may also hold node instances where
    child dicts would go (``"nodes": next_(el.content)`` in a deserialize
    rule) and :class:`Mark` instances among a text's ``marks``. Those are
    kept as they are.

    Parameters
    ----------
    payload : Mapping
        Dict with an ``object`` key of ``"block"``, ``"inline"`` or ``"text"``
    allow_pending : bool, default False
        Also accept ``{"object": "mark", "nodes": [...]}`` and return a
        :class:`PendingMark`. Only deserialize rules may produce those.

    Returns
    -------
    Node or PendingMark
        The converted node, with missing fields defaulted

    Raises
    ------
    NodeFormatError
        If the payload is not a recognized node object

    """
    payload = _require_mapping(payload, "node")
    kind = payload.get("object")

    if kind == OBJECT_TEXT:
        text = payload.get("text")
        marks = payload.get("marks") or []
        return Text(
            text=text if text is not None else "",
            marks=[mark if allow_pending and isinstance(mark, Mark) else mark_from_dict(mark) for mark in marks],
        )

    if kind in (OBJECT_BLOCK, OBJECT_INLINE) or (allow_pending and kind == OBJECT_MARK):
        if "type" not in payload:
            raise NodeFormatError(f"{kind} object has no 'type'", payload=payload)
        children = payload.get("nodes") or []
        if not isinstance(children, list):
            raise NodeFormatError("'nodes' must be a list", payload=payload)
        nodes = [_child_from(child, allow_pending) for child in children]
        if kind == OBJECT_MARK:
            return PendingMark(type=payload["type"], data=_data_of(payload), nodes=nodes)
        cls = Block if kind == OBJECT_BLOCK else Inline
        return cls(type=payload["type"], data=_data_of(payload), nodes=nodes)  # type: ignore[arg-type]

    raise NodeFormatError(f"Unknown node object: {kind!r}", payload=payload)


def value_from_dict(payload: Any) -> Value:
    """Convert a Slate value dict to a :class:`Value`.

    A bare document dict (``{"object": "document", ...}``) is also accepted.

    Raises
    ------
    NodeFormatError
        If the payload is not a value or document object

    """
    payload = _require_mapping(payload, "value")
    if payload.get("object") == OBJECT_VALUE:
        document = _require_mapping(payload.get("document") or {"object": OBJECT_DOCUMENT}, "document")
    elif payload.get("object") == OBJECT_DOCUMENT:
        document = payload
    else:
        raise NodeFormatError(f"Unknown value object: {payload.get('object')!r}", payload=payload)

    if document.get("object", OBJECT_DOCUMENT) != OBJECT_DOCUMENT:
        raise NodeFormatError("Value 'document' is not a document object", payload=document)

    nodes = [node_from_dict(child) for child in document.get("nodes") or []]
    return Value(document=Document(nodes=nodes, data=_data_of(document)))  # type: ignore[arg-type]


def value_to_dict(value: Value) -> dict[str, Any]:
    """Convert a :class:`Value` to its Slate dict form."""
    return value.to_dict()


def value_to_json(value: Value, indent: int | None = None) -> str:
    """Serialize a :class:`Value` to a Slate JSON string.

    Parameters
    ----------
    value : Value
        Document tree to serialize
    indent : int or None, default None
        JSON indentation level

    """
    return json.dumps(value_to_dict(value), indent=indent, ensure_ascii=False)


def value_from_json(text: str) -> Value:
    """Parse a Slate JSON string into a :class:`Value`.

    Raises
    ------
    NodeFormatError
        If the text is not valid JSON or not a value object

    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise NodeFormatError(f"Invalid JSON: {e}", original_error=e) from e
    except RecursionError as e:
        raise NodeFormatError("JSON is nested too deeply to read", original_error=e) from e

    try:
        return value_from_dict(payload)
    except RecursionError as e:
        raise NodeFormatError("Document is nested too deeply to read", original_error=e) from e
