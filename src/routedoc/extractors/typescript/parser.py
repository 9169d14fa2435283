"""
tree-sitter front end for TypeScript / JavaScript sources.

Wraps a parsed file together with the small set of structural questions the
route extractors ask: which nodes are class declarations, which decorators are
attached to a declaration (name + call arguments), which comment documents a
member, whether an argument is a statically known string, and
which line a node starts on.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional

import tree_sitter_typescript as tstypescript
from tree_sitter import Language, Node, Parser, Tree

from routedoc.domain.errors import SourceParseError

logger = logging.getLogger(__name__)

CLASS_NODE_TYPES = ("class_declaration", "abstract_class_declaration", "class")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}
_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_DOC_GUTTER = re.compile(r"^\s*\*?\s?")


@lru_cache(maxsize=None)
def _language(name: str) -> Language:
    if name == "tsx":
        return Language(tstypescript.language_tsx())
    return Language(tstypescript.language_typescript())


def _grammar_for(path: Path) -> str:
    # .ts is the only suffix where `<T>expr` casts must win over JSX
    return "typescript" if path.suffix.lower() == ".ts" else "tsx"


@dataclass(frozen=True)
class Decorator:
    name: Optional[str]         # None when the callee is not a bare identifier
    arguments: tuple[Node, ...]  # named argument nodes, comments excluded
    node: Node


@dataclass
class SourceTree:
    path: Path
    text: str
    tree: Tree
    grammar: str = "typescript"

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def walk(self) -> Iterator[Node]:
        """Pre-order traversal over every node in the file."""
        cursor = self.tree.walk()
        reached_root = False
        while not reached_root:
            yield cursor.node
            if cursor.goto_first_child():
                continue
            if cursor.goto_next_sibling():
                continue
            retracing = True
            while retracing:
                if not cursor.goto_parent():
                    retracing = False
                    reached_root = True
                elif cursor.goto_next_sibling():
                    retracing = False


def parse_source(path: Path, text: str) -> SourceTree:
    grammar = _grammar_for(path)
    parser = Parser(_language(grammar))
    tree = parser.parse(text.encode("utf-8"))
    if tree.root_node.has_error:
        logger.debug("Syntax errors in %s; extracting from the recoverable tree", path)
    return SourceTree(path=path, text=text, tree=tree, grammar=grammar)


def parse_file(path: Path) -> SourceTree:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise SourceParseError(path, f"not valid UTF-8 ({e.reason})") from e
    except OSError as e:
        raise SourceParseError(path, e.strerror or str(e)) from e
    return parse_source(path, text)


# ----------------------------
# Node helpers
# ----------------------------


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def start_line(node: Node) -> int:
    """1-based line of the node's first character."""
    return node.start_point[0] + 1


def named_arguments(call: Node) -> tuple[Node, ...]:
    args = call.child_by_field_name("arguments")
    if args is None:
        return ()
    return tuple(c for c in args.named_children if c.type != "comment")


def resolve_string_literal(node: Optional[Node]) -> Optional[str]:
    """
    Return the value of a plain string literal or a template literal without
    substitutions. Everything else (identifiers, concatenations, `${}` templates)
    is unknown and yields None. No partial evaluation.
    """
    if node is None:
        return None

    if node.type == "template_string" and any(
        c.type == "template_substitution" for c in node.children
    ):
        return None

    if node.type in ("string", "template_string"):
        try:
            return _decode_escapes(node_text(node)[1:-1])
        except ValueError:
            # out-of-range code point or lone surrogate
            logger.debug("Undecodable escape in literal at line %d", start_line(node))
            return None

    if node.type == "parenthesized_expression" and node.named_child_count == 1:
        return resolve_string_literal(node.named_children[0])

    return None


def _decode_escapes(raw: str) -> str:
    def repl(m: re.Match) -> str:
        esc = m.group(1)
        if esc in ("\n", "\r\n", "\r"):
            return ""  # line continuation
        if esc.startswith("u{"):
            return chr(int(esc[2:-1], 16))
        if esc.startswith("u") and len(esc) == 5:
            return chr(int(esc[1:], 16))
        if esc.startswith("x") and len(esc) == 3:
            return chr(int(esc[1:], 16))
        return _SIMPLE_ESCAPES.get(esc, esc)

    decoded = _ESCAPE.sub(repl, raw)
    # JS strings are UTF-16; join \uD83D\uDE00 style surrogate halves
    return decoded.encode("utf-16", "surrogatepass").decode("utf-16")


def parse_decorator(node: Node) -> Decorator:
    """
    @Controller('users') -> name="Controller", arguments=(<string>,)
    @Get                 -> name="Get", arguments=()
    @nest.Get()          -> name=None
    """
    expr = next((c for c in node.named_children if c.type != "comment"), None)
    if expr is not None and expr.type == "call_expression":
        callee = expr.child_by_field_name("function")
        name = node_text(callee) if callee is not None and callee.type == "identifier" else None
        return Decorator(name=name, arguments=named_arguments(expr), node=node)
    if expr is not None and expr.type == "identifier":
        return Decorator(name=node_text(expr), arguments=(), node=node)
    return Decorator(name=None, arguments=(), node=node)


def class_decorators(class_node: Node) -> list[Decorator]:
    """
    Decorators on a class live either on the class node itself
    (`@Controller() class X {}`) or on the wrapping export statement
    (`@Controller() export class X {}`).
    """
    nodes = [c for c in class_node.children if c.type == "decorator"]
    parent = class_node.parent
    if parent is not None and parent.type == "export_statement":
        nodes = [c for c in parent.children if c.type == "decorator"] + nodes
    return [parse_decorator(n) for n in nodes]


def leading_trivia(member: Node) -> tuple[list[Node], list[Node]]:
    """
    Collect (decorators, comments) attached in front of a class member.

    In the TypeScript grammar member decorators are siblings that precede the
    member inside the class body; the JavaScript flavour nests them inside the
    member. Both are returned, in source order.
    """
    decorators: list[Node] = []
    comments: list[Node] = []

    sib = member.prev_sibling
    while sib is not None and sib.type in ("decorator", "comment"):
        if sib.type == "decorator":
            decorators.insert(0, sib)
        else:
            comments.insert(0, sib)
        sib = sib.prev_sibling

    decorators.extend(c for c in member.children if c.type == "decorator")
    return decorators, comments


def doc_comment_text(comments: list[Node]) -> Optional[str]:
    """
    Text of the closest `/** ... */` comment, gutters removed, cut at the first
    block tag (`@param`, `@returns`, ...). None when missing or empty.
    """
    for c in reversed(comments):
        raw = node_text(c)
        if not raw.startswith("/**") or raw.startswith("/**/"):
            continue
        body = raw[3:-2] if raw.endswith("*/") else raw[3:]
        lines: list[str] = []
        for line in body.splitlines():
            line = _DOC_GUTTER.sub("", line, count=1).rstrip()
            if line.lstrip().startswith("@"):
                break
            lines.append(line)
        text = "\n".join(lines).strip()
        return text or None
    return None


def member_name(member: Node) -> Optional[str]:
    name = member.child_by_field_name("name")
    text = node_text(name)
    return text or None


def top_level_classes(tree: SourceTree) -> Iterator[Node]:
    """Class declarations directly in the program body, exported or not."""
    for child in tree.root.children:
        if child.type in CLASS_NODE_TYPES:
            yield child
        elif child.type == "export_statement":
            decl = child.child_by_field_name("declaration") or child.child_by_field_name("value")
            if decl is not None and decl.type in CLASS_NODE_TYPES:
                yield decl
