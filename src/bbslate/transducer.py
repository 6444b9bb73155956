#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/bbslate/transducer.py
"""BBCode serializer/deserializer facade."""

from __future__ import annotations

from typing import Any, Collection, Mapping, Optional, Sequence, Union

from bbslate.deserializer import Deserializer, Tokenizer
from bbslate.nodes import Value
from bbslate.options import DeserializeOptions, SerializeOptions
from bbslate.rules import EscapingRule
from bbslate.serializer import Serializer


class BBCodeTransducer:
    """Convert between BBCode and a Slate document tree with a rule chain.

    The built-in :class:`~bbslate.rules.EscapingRule` always runs first, so
    caller rules cannot change how literal text is escaped. Among caller rules,
    earlier rules take precedence.

    Parameters
    ----------
    rules : sequence of rules
        Caller rules, in precedence order
    allowed_tags : collection of str or None, default None
        Tags the tokenizer recognizes; ``None`` recognizes all
    tokenizer : callable, optional
        Replacement for :func:`bbslate.tokenizer.tokenize`

    Examples
    --------
        >>> from bbslate import BBCodeTransducer, Block, PendingMark, TagRule
        >>> rules = [
        ...     TagRule(tags={"p"}, types={"paragraph"},
        ...             deserialize=lambda el, next_: Block("paragraph", nodes=next_(el.content)),
        ...             serialize=lambda node, children: f"[p]{children}[/p]"),
        ...     TagRule(tags={"b"}, types={"bold"},
        ...             deserialize=lambda el, next_: PendingMark("bold", nodes=next_(el.content)),
        ...             serialize=lambda mark, children: f"[b]{children}[/b]"),
        ... ]
        >>> bbcode = BBCodeTransducer(rules)
        >>> bbcode.serialize(bbcode.deserialize("[p]a [b]b[/b][/p]"))
        '[p]a [b]b[/b][/p]'

    """

    def __init__(
        self,
        rules: Sequence[Any] = (),
        allowed_tags: Collection[str] | None = None,
        tokenizer: Tokenizer | None = None,
    ):
        """Initialize the transducer with caller rules."""
        self.rules = (EscapingRule(), *rules)
        self.allowed_tags = allowed_tags

        self.serializer = Serializer(self.rules)
        self.deserializer = Deserializer(self.rules, allowed_tags, tokenizer=tokenizer)

    def serialize(self, value: Union[Value, Mapping[str, Any]], options: SerializeOptions | None = None) -> str:
        """Serialize a document value (or its Slate dict) to BBCode."""
        return self.serializer.serialize(value, options)

    def deserialize(
        self, markup: str, options: DeserializeOptions | None = None, type: Optional[str] = None
    ) -> Value:
        """Deserialize BBCode to a document value.

        Parameters
        ----------
        markup : str
            BBCode text
        options : DeserializeOptions or None, default None
            Deserialization options
        type : str, optional
            Shortcut for ``DeserializeOptions(type=...)``; overrides ``options``

        """
        options = options or DeserializeOptions()
        if type is not None:
            options = options.create_updated(type=type)
        return self.deserializer.deserialize(markup, options)
