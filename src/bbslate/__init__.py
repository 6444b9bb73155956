"""bbslate - a rule-driven converter between BBCode and Slate document trees.

bbslate turns BBCode markup into the JSON document model used by the Slate
rich-text editor (blocks, inlines, text leaves carrying marks) and back. It
ships no tag vocabulary: every tag is handled by caller-supplied rules, tried
in order, with the first rule that handles an element or node winning.

Examples
--------
    >>> from bbslate import BBCodeTransducer, Block, PendingMark, TagRule
    >>> rules = [
    ...     TagRule(tags={"quote"}, types={"quote"},
    ...             deserialize=lambda el, next_: Block("quote", nodes=next_(el.content)),
    ...             serialize=lambda node, children: f"[quote]{children}[/quote]"),
    ...     TagRule(tags={"i"}, types={"italic"},
    ...             deserialize=lambda el, next_: PendingMark("italic", nodes=next_(el.content)),
    ...             serialize=lambda mark, children: f"[i]{children}[/i]"),
    ... ]
    >>> bbcode = BBCodeTransducer(rules)
    >>> value = bbcode.deserialize("[quote][i]so it goes[/i][/quote]")
    >>> value.document.nodes[0].nodes[0].marks[0].type
    'italic'

Tags no rule handles are kept as literal text, and a warning is logged.
"""

from bbslate.deserializer import Deserializer
from bbslate.elements import Element, merge_text
from bbslate.exceptions import (
    BBSlateError,
    DeserializationError,
    InvalidContinuationArgumentError,
    InvalidRuleResultError,
    NodeFormatError,
    SerializationError,
    TokenizationError,
    UnmatchedMarkSerializationError,
    UnmatchedNodeSerializationError,
)
from bbslate.marks import apply_mark
from bbslate.nodes import Block, Document, Inline, Mark, Node, PendingMark, StringCarrier, Text, Value
from bbslate.options import DeserializeOptions, SerializeOptions, TokenizerOptions
from bbslate.rules import SUPPRESSED, UNHANDLED, EscapingRule, Matched, Rule, RuleResult, TagRule
from bbslate.serialization import node_from_dict, value_from_dict, value_from_json, value_to_dict, value_to_json
from bbslate.serializer import Serializer
from bbslate.tokenizer import BBCodeTokenizer, tokenize
from bbslate.transducer import BBCodeTransducer

__version__ = "0.1.0"

__all__ = [
    "BBCodeTransducer",
    "BBCodeTokenizer",
    "BBSlateError",
    "Block",
    "DeserializationError",
    "DeserializeOptions",
    "Deserializer",
    "Document",
    "Element",
    "EscapingRule",
    "Inline",
    "InvalidContinuationArgumentError",
    "InvalidRuleResultError",
    "Mark",
    "Matched",
    "Node",
    "NodeFormatError",
    "PendingMark",
    "Rule",
    "RuleResult",
    "SUPPRESSED",
    "SerializationError",
    "SerializeOptions",
    "Serializer",
    "StringCarrier",
    "TagRule",
    "Text",
    "TokenizationError",
    "TokenizerOptions",
    "UNHANDLED",
    "UnmatchedMarkSerializationError",
    "UnmatchedNodeSerializationError",
    "Value",
    "apply_mark",
    "merge_text",
    "node_from_dict",
    "tokenize",
    "value_from_dict",
    "value_from_json",
    "value_to_dict",
    "value_to_json",
]
