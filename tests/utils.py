"""Test utilities for the bbslate test suite.

Provides a small forum rule set used across unit, integration and CLI tests,
plus helpers for inspecting document trees.
"""

from typing import Iterator

from bbslate import SUPPRESSED, Block, Inline, Matched, Node, PendingMark, TagRule, Text
from bbslate.nodes import Container


def _paragraph(el, next_):
    return Block("paragraph", nodes=next_(el.content))


def _quote(el, next_):
    data = {"author": el.value} if el.value else {}
    return Block("quote", data=data, nodes=next_(el.content))


def _serialize_quote(node, children):
    author = node.data.get("author")
    if author:
        return f"[quote={author}]{children}[/quote]"
    return f"[quote]{children}[/quote]"


def _link(el, next_):
    return Inline("link", data={"href": el.value or el.text_content()}, nodes=next_(el.content))


def _color(el, next_):
    return PendingMark("color", data={"color": el.value}, nodes=next_(el.content))


def make_forum_rules() -> list:
    """Return a rule set covering paragraphs, quotes, links and common marks.

    ``[comment]`` elements are suppressed and ``[size]`` wrappers are dropped
    in favor of their content.
    """
    return [
        TagRule(
            tags={"p"},
            types={"paragraph"},
            deserialize=_paragraph,
            serialize=lambda node, children: f"[p]{children}[/p]",
        ),
        TagRule(tags={"quote"}, types={"quote"}, deserialize=_quote, serialize=_serialize_quote),
        TagRule(
            tags={"url"},
            types={"link"},
            deserialize=_link,
            serialize=lambda node, children: f"[url={node.data['href']}]{children}[/url]",
        ),
        TagRule(
            tags={"b"},
            types={"bold"},
            deserialize=lambda el, next_: PendingMark("bold", nodes=next_(el.content)),
            serialize=lambda mark, children: f"[b]{children}[/b]",
        ),
        TagRule(
            tags={"i"},
            types={"italic"},
            deserialize=lambda el, next_: PendingMark("italic", nodes=next_(el.content)),
            serialize=lambda mark, children: f"[i]{children}[/i]",
        ),
        TagRule(
            tags={"color"},
            types={"color"},
            deserialize=_color,
            serialize=lambda mark, children: f"[color={mark.data['color']}]{children}[/color]",
        ),
        TagRule(tags={"comment"}, deserialize=lambda el, next_: SUPPRESSED),
        TagRule(tags={"size"}, deserialize=lambda el, next_: Matched(None)),
    ]


def iter_nodes(nodes: list[Node]) -> Iterator[Node]:
    """Yield every node of a tree, depth first."""
    for node in nodes:
        yield node
        if isinstance(node, Container):
            yield from iter_nodes(node.nodes)


def collect_text(nodes: list[Node]) -> str:
    """Concatenate the text of every leaf in document order."""
    return "".join(node.text for node in iter_nodes(nodes) if isinstance(node, Text))
