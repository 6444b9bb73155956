"""Unit tests for the deserializer engine."""

import logging
import sys

import pytest
from utils import collect_text, iter_nodes

from bbslate import BBCodeTransducer
from bbslate.deserializer import Deserializer
from bbslate.elements import Element
from bbslate.exceptions import DeserializationError, InvalidContinuationArgumentError, InvalidRuleResultError
from bbslate.nodes import Block, Inline, Mark, PendingMark, Text, Value
from bbslate.options import DeserializeOptions
from bbslate.rules import SUPPRESSED, UNHANDLED, EscapingRule, Matched, TagRule

BOLD = Mark("bold")
ITALIC = Mark("italic")


def _fixed_tokenizer(tree):
    """Return a tokenizer stub that ignores the markup and yields ``tree``."""

    def tokenizer(markup, allowed_tags=None, enable_escape_tags=False):
        return tree

    return tokenizer


@pytest.mark.unit
class TestDeserialize:
    """Tests for end-to-end deserialization with the forum rules."""

    def test_paragraph_with_marks(self, transducer) -> None:
        value = transducer.deserialize("[p]Hello [b]world[/b][/p]")
        assert isinstance(value, Value)
        assert value.document.nodes == [
            Block("paragraph", nodes=[Text("Hello "), Text("world", marks=[BOLD])]),
        ]

    def test_envelope(self, transducer) -> None:
        assert transducer.deserialize("[p]x[/p]").to_dict() == {
            "object": "value",
            "document": {
                "object": "document",
                "data": {},
                "nodes": [
                    {
                        "object": "block",
                        "type": "paragraph",
                        "data": {},
                        "nodes": [{"object": "text", "text": "x", "marks": []}],
                    }
                ],
            },
        }

    def test_mark_flattening(self, transducer) -> None:
        value = transducer.deserialize("[b]hi[/b]", type="inline")
        assert value.document.nodes == [Text("hi", marks=[BOLD])]
        assert not any(isinstance(node, PendingMark) for node in iter_nodes(value.document.nodes))

    def test_nested_marks_inner_first(self, transducer) -> None:
        value = transducer.deserialize("[i][b]x[/b][/i]", type="inline")
        assert value.document.nodes == [Text("x", marks=[BOLD, ITALIC])]

    def test_mark_with_data(self, transducer) -> None:
        value = transducer.deserialize("[p][color=red]x[/color][/p]")
        assert value.document.nodes[0].nodes == [Text("x", marks=[Mark("color", {"color": "red"})])]

    def test_mark_data_is_not_shared_between_leaves(self, transducer) -> None:
        leaves = transducer.deserialize("[color=red]a[b]x[/b]c[/color]", type="inline").document.nodes
        leaves[0].marks[0].data["color"] = "blue"
        assert leaves[-1].marks[0].data == {"color": "red"}
        assert leaves[1].marks == [BOLD, Mark("color", {"color": "red"})]

    def test_mark_across_inline(self, transducer) -> None:
        value = transducer.deserialize("[p][b]see [url=http://x]here[/url][/b][/p]")
        assert value.document.nodes[0].nodes == [
            Text("see ", marks=[BOLD]),
            Inline("link", data={"href": "http://x"}, nodes=[Text("here", marks=[BOLD])]),
        ]

    def test_block_data(self, transducer) -> None:
        value = transducer.deserialize("[quote=Jane]hi[/quote]")
        assert value.document.nodes == [Block("quote", data={"author": "Jane"}, nodes=[Text("hi")])]

    def test_escaped_text(self, transducer) -> None:
        value = transducer.deserialize(r"[p]a\[b\]c\\d[/p]")
        assert value.document.nodes[0].nodes == [Text("a[b]c\\d")]

    def test_escaped_text_is_one_leaf(self, transducer) -> None:
        value = transducer.deserialize(r"[p]x \[b\] y[/p]")
        assert len(value.document.nodes[0].nodes) == 1


@pytest.mark.unit
class TestNestingDepth:
    """Tests for deeply nested markup."""

    def test_moderate_nesting_round_trips(self, transducer) -> None:
        markup = "[quote]" * 50 + "x" + "[/quote]" * 50
        assert transducer.serialize(transducer.deserialize(markup)) == markup

    def test_nesting_past_recursion_limit_raises_library_error(self, transducer) -> None:
        depth = sys.getrecursionlimit() + 50
        markup = "[quote]" * depth + "x" + "[/quote]" * depth
        with pytest.raises(DeserializationError) as exc_info:
            transducer.deserialize(markup)
        assert isinstance(exc_info.value.original_error, RecursionError)


@pytest.mark.unit
class TestTopLevelFiltering:
    """Tests for the ``type`` option."""

    MARKUP = "[p]a[/p][url=http://x]b[/url]tail"

    def test_block_keeps_blocks(self, transducer) -> None:
        value = transducer.deserialize(self.MARKUP)
        assert [node.type for node in value.document.nodes] == ["paragraph"]

    def test_explicit_block_option(self, transducer) -> None:
        value = transducer.deserialize(self.MARKUP, DeserializeOptions(type="block"))
        assert len(value.document.nodes) == 1

    def test_other_type_keeps_non_blocks(self, transducer) -> None:
        value = transducer.deserialize(self.MARKUP, type="inline")
        assert value.document.nodes == [Inline("link", data={"href": "http://x"}, nodes=[Text("b")]), Text("tail")]

    def test_any_non_block_type(self, transducer) -> None:
        value = transducer.deserialize(self.MARKUP, DeserializeOptions(type="text"))
        assert len(value.document.nodes) == 2

    def test_keyword_overrides_options(self, transducer) -> None:
        value = transducer.deserialize(self.MARKUP, DeserializeOptions(type="block"), type="inline")
        assert len(value.document.nodes) == 2


@pytest.mark.unit
class TestLiteralFallback:
    """Tests for tags no rule handles."""

    def test_unknown_tag_kept_literally(self, transducer) -> None:
        value = transducer.deserialize("[p][foo]bar[/foo][/p]")
        paragraph = value.document.nodes[0]
        assert paragraph.nodes == [Text("[foo]"), Text("bar"), Text("[/foo]")]
        assert collect_text(paragraph.nodes) == "[foo]bar[/foo]"

    def test_one_warning_per_occurrence(self, transducer, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="bbslate.deserializer"):
            transducer.deserialize("[p][foo]a[/foo][foo]b[/foo][/p]")
        warnings = [r for r in caplog.records if r.name == "bbslate.deserializer" and r.levelno == logging.WARNING]
        assert len(warnings) == 2
        assert all('"foo"' in r.getMessage() for r in warnings)

    def test_attributes_kept(self, transducer) -> None:
        value = transducer.deserialize("[p][spoiler=Ending]x[/spoiler][/p]")
        assert collect_text(value.document.nodes) == "[spoiler=Ending]x[/spoiler]"

    def test_void_tag_gets_no_closing_text(self, transducer) -> None:
        value = transducer.deserialize("[p]note [1] here[/p]")
        assert value.document.nodes[0].nodes == [Text("note "), Text("[1]"), Text(" here")]
        assert transducer.serialize(value) == r"[p]note \[1\] here[/p]"

    def test_tag_spelling_is_kept(self, transducer) -> None:
        value = transducer.deserialize("[p][FOO]x[/Foo][/p]")
        assert collect_text(value.document.nodes) == "[FOO]x[/Foo]"

    def test_content_is_still_converted(self, transducer) -> None:
        value = transducer.deserialize("[p][foo][b]x[/b][/foo][/p]")
        assert value.document.nodes[0].nodes[1] == Text("x", marks=[BOLD])

    def test_top_level_fallback_is_text(self, transducer) -> None:
        assert transducer.deserialize("[foo]bar[/foo]").document.nodes == []
        inline = transducer.deserialize("[foo]bar[/foo]", type="inline")
        assert collect_text(inline.document.nodes) == "[foo]bar[/foo]"

    def test_disallowed_tag_is_plain_text_without_warning(self, forum_rules, caplog) -> None:
        transducer = BBCodeTransducer(forum_rules, allowed_tags={"p"})
        with caplog.at_level(logging.WARNING, logger="bbslate.deserializer"):
            value = transducer.deserialize("[p][b]x[/b][/p]")
        assert value.document.nodes[0].nodes == [Text("[b]x[/b]")]
        assert not [r for r in caplog.records if r.name == "bbslate.deserializer"]

    def test_string_without_escaping_rule(self, caplog) -> None:
        deserializer = Deserializer([], tokenizer=_fixed_tokenizer(["plain"]))
        with caplog.at_level(logging.WARNING, logger="bbslate.deserializer"):
            value = deserializer.deserialize("", DeserializeOptions(type="inline"))
        assert value.document.nodes == [Text("plain")]
        assert len(caplog.records) == 1


@pytest.mark.unit
class TestRuleDispatch:
    """Tests for rule precedence and result handling."""

    def _deserialize(self, rules, tree, node_type="inline"):
        deserializer = Deserializer([EscapingRule(), *rules], tokenizer=_fixed_tokenizer(tree))
        return deserializer.deserialize("", DeserializeOptions(type=node_type)).document.nodes

    def test_first_rule_wins(self) -> None:
        rules = [
            TagRule(tags={"b"}, deserialize=lambda el, next_: PendingMark("strong", nodes=next_(el.content))),
            TagRule(tags={"b"}, deserialize=lambda el, next_: PendingMark("bold", nodes=next_(el.content))),
        ]
        assert self._deserialize(rules, [Element("b", content=["x"])]) == [Text("x", marks=[Mark("strong")])]

    def test_unhandled_falls_through(self) -> None:
        rules = [
            TagRule(tags={"b"}, deserialize=lambda el, next_: UNHANDLED),
            TagRule(tags={"b"}, deserialize=lambda el, next_: PendingMark("bold", nodes=next_(el.content))),
        ]
        assert self._deserialize(rules, [Element("b", content=["x"])]) == [Text("x", marks=[BOLD])]

    def test_suppressed_skips_fallback(self, caplog) -> None:
        rules = [TagRule(tags={"comment"}, deserialize=lambda el, next_: SUPPRESSED)]
        with caplog.at_level(logging.WARNING, logger="bbslate.deserializer"):
            nodes = self._deserialize(rules, ["a", Element("comment", content=["hidden"]), "b"])
        assert nodes == [Text("a"), Text("b")]
        assert not caplog.records

    def test_pass_through(self) -> None:
        rules = [TagRule(tags={"size"}, deserialize=lambda el, next_: Matched(None))]
        nodes = self._deserialize(rules, [Element("size", {"size": "4"}, ["big ", Element("size", content=["x"])])])
        assert nodes == [Text("big "), Text("x")]

    def test_rule_may_return_list(self) -> None:
        rules = [TagRule(tags={"br"}, deserialize=lambda el, next_: [Text("\n"), Text("")])]
        assert self._deserialize(rules, [Element("br")]) == [Text("\n"), Text("")]

    def test_dict_results_are_converted_and_backfilled(self) -> None:
        rules = [
            TagRule(tags={"p"}, deserialize=lambda el, next_: {"object": "block", "type": "paragraph"}),
            TagRule(tags={"t"}, deserialize=lambda el, next_: {"object": "text", "text": None}),
            TagRule(
                tags={"b"},
                deserialize=lambda el, next_: {
                    "object": "mark",
                    "type": "bold",
                    "nodes": [{"object": "text", "text": "y"}],
                },
            ),
        ]
        assert self._deserialize(rules, [Element("p")], node_type="block") == [Block("paragraph", data={}, nodes=[])]
        assert self._deserialize(rules, [Element("t")]) == [Text("", marks=[])]
        assert self._deserialize(rules, [Element("b")]) == [Text("y", marks=[BOLD])]

    def test_dict_results_may_hold_converted_children(self) -> None:
        rules = [
            TagRule(
                tags={"p"},
                deserialize=lambda el, next_: {"object": "block", "type": "paragraph", "nodes": next_(el.content)},
            ),
            TagRule(
                tags={"url"},
                deserialize=lambda el, next_: {
                    "object": "inline",
                    "type": "link",
                    "data": {"href": el.value},
                    "nodes": next_(el.content),
                },
            ),
            TagRule(
                tags={"b"},
                deserialize=lambda el, next_: {"object": "mark", "type": "bold", "nodes": next_(el.content)},
            ),
        ]
        tree = [Element("p", content=["hi ", Element("b", content=["x", Element("url", {"url": "http://x"}, ["y"])])])]
        assert self._deserialize(rules, tree, node_type="block") == [
            Block(
                "paragraph",
                nodes=[
                    Text("hi "),
                    Text("x", marks=[BOLD]),
                    Inline("link", data={"href": "http://x"}, nodes=[Text("y", marks=[BOLD])]),
                ],
            )
        ]

    def test_dict_text_may_hold_mark_instances(self) -> None:
        rules = [
            TagRule(tags={"t"}, deserialize=lambda el, next_: {"object": "text", "text": "x", "marks": [BOLD]}),
            TagRule(tags={"u"}, deserialize=lambda el, next_: Text("y", marks=[{"type": "italic"}])),
        ]
        assert self._deserialize(rules, [Element("t"), Element("u")]) == [
            Text("x", marks=[BOLD]),
            Text("y", marks=[ITALIC]),
        ]

    def test_dict_rule_through_transducer(self) -> None:
        rules = [
            TagRule(
                tags={"p"},
                deserialize=lambda el, next_: {"object": "block", "type": "paragraph", "nodes": next_(el.content)},
            )
        ]
        value = BBCodeTransducer(rules).deserialize("[p]hi[/p]")
        assert value.document.nodes == [Block("paragraph", nodes=[Text("hi")])]

    def test_missing_fields_backfilled(self) -> None:
        rules = [
            TagRule(tags={"p"}, deserialize=lambda el, next_: Block("paragraph", data=None, nodes=None)),
            TagRule(tags={"t"}, deserialize=lambda el, next_: Text(text=None, marks=None)),
        ]
        assert self._deserialize(rules, [Element("p")], node_type="block") == [Block("paragraph")]
        result = self._deserialize(rules, [Element("t")])
        assert result == [Text("")]
        assert result[0].marks == []

    def test_pending_marks_inside_blocks_are_resolved(self) -> None:
        rules = [
            TagRule(
                tags={"p"},
                deserialize=lambda el, next_: Block("paragraph", nodes=[PendingMark("bold", nodes=next_(el.content))]),
            )
        ]
        nodes = self._deserialize(rules, [Element("p", content=["x"])], node_type="block")
        assert nodes == [Block("paragraph", nodes=[Text("x", marks=[BOLD])])]

    def test_next_accepts_single_element_string_and_none(self) -> None:
        seen = {}

        def capture(el, next_):
            seen["element"] = next_(el.content[0])
            seen["string"] = next_("s")
            seen["none"] = next_(None)
            seen["empty"] = next_()
            return Text("done")

        self._deserialize([TagRule(tags={"x"}, deserialize=capture)], [Element("x", content=[Element("y")])])
        assert seen["string"] == [Text("s")]
        assert seen["none"] == []
        assert seen["empty"] == []
        assert collect_text(seen["element"]) == "[y][/y]"

    def test_next_rejects_invalid_argument(self) -> None:
        rules = [TagRule(tags={"b"}, deserialize=lambda el, next_: next_(42))]
        with pytest.raises(InvalidContinuationArgumentError) as exc_info:
            self._deserialize(rules, [Element("b")])
        assert exc_info.value.argument == 42
        assert exc_info.value.tag == "b"

    def test_next_rejects_mixed_sequence(self) -> None:
        rules = [TagRule(tags={"b"}, deserialize=lambda el, next_: next_(["ok", 1]))]
        with pytest.raises(InvalidContinuationArgumentError):
            self._deserialize(rules, [Element("b")])

    def test_invalid_result_raises(self) -> None:
        rules = [TagRule(tags={"b"}, deserialize=lambda el, next_: 42)]
        with pytest.raises(InvalidRuleResultError):
            self._deserialize(rules, [Element("b")])

    def test_rules_without_deserialize_are_skipped(self) -> None:
        class SerializeOnly:
            def serialize(self, obj, children):
                return None

        nodes = self._deserialize([SerializeOnly()], ["a"])
        assert nodes == [Text("a")]

    def test_fragmented_text_is_merged(self) -> None:
        nodes = self._deserialize([], ["a", "b", "c"])
        assert nodes == [Text("abc")]

    def test_tokenizer_receives_allow_list_and_escapes(self) -> None:
        calls = []

        def tokenizer(markup, allowed_tags=None, enable_escape_tags=False):
            calls.append((markup, allowed_tags, enable_escape_tags))
            return []

        Deserializer([], allowed_tags=["b"], tokenizer=tokenizer).deserialize("[b]x[/b]")
        assert calls == [("[b]x[/b]", frozenset({"b"}), True)]
