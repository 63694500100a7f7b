"""Syntax helpers over tree-sitter Go nodes.

Pure functions that turn tree-sitter nodes into model fragments:
- render_expr: literal written form of a type expression
- receiver_base_name: base type identifier of a method receiver
- doc_comments / line_comments / comment_text / doc_text: Go comment handling

Nothing here resolves types; two syntactically different spellings of the
same type render as different strings.
"""

import re
from collections.abc import Iterator
from typing import Any

COMMENT = "comment"

# Statement terminators appear as anonymous tokens in tree-sitter-go
TERMINATORS = frozenset({"\n", ";", "\x00"})

# Literals rendered as a single token even though the grammar splits them
ATOMIC_NODES = frozenset({
    "interpreted_string_literal",
    "raw_string_literal",
    "rune_literal",
})

# Types with a braced member list, laid out member by member
BODY_TYPES = frozenset({"struct_type", "interface_type"})

_NO_SPACE_AFTER = frozenset({"(", "[", ".", "~", "..."})
_NO_SPACE_BEFORE = frozenset({")", "]", ",", "."})
_CLOSERS = frozenset({")", "]"})

# A single-member body stays on one line up to this many bytes
ONE_LINE_MAX = 30
TAB_WIDTH = 8

_DIRECTIVE_PREFIXES = ("line ", "extern ", "export ")
_DIRECTIVE_RE = re.compile(r"^[a-z0-9]+:[a-z0-9]")


def node_text(node: Any, source: bytes) -> str:
    """Return the source text covered by a node."""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def is_exported(name: str) -> bool:
    """Return True if a Go identifier is exported (starts with an upper-case letter)."""
    return bool(name) and name[0].isupper()


# =============================================================================
# Expression Rendering
# =============================================================================
#
# Rendering follows gofmt. Inline struct and interface types with more than
# one member, or with a member too long for one line, are written one member
# per line. The layout pass emits go/printer's control characters: "\t" for
# indentation, "\v" between aligned cells and "\f" where alignment restarts.
# align_cells() then expands them into tab-aligned columns.


def _leaves(node: Any) -> Iterator[Any]:
    if node.type == COMMENT or node.type in TERMINATORS:
        return
    if node.child_count == 0 or node.type in ATOMIC_NODES or node.type in BODY_TYPES:
        yield node
        return
    for child in node.children:
        yield from _leaves(child)


def _separator(prev: Any, tok: Any) -> str:
    p, t = prev.type, tok.type

    if p == ",":
        return " "
    if t in _NO_SPACE_BEFORE or p in _NO_SPACE_AFTER:
        return ""
    if p == "*" and prev.parent is not None and prev.parent.type == "pointer_type":
        return ""
    if (p, t) in (("chan", "<-"), ("<-", "chan")):
        return ""
    if p == "<-" or p == "|" or t == "|":
        return " "
    # Element type after map key, slice or array length
    if p == "]":
        return ""
    return " " if tok.start_byte > prev.end_byte else ""


def _layout(node: Any, source: bytes, indent: int) -> str:
    """Lay out an expression whose first line sits at ``indent`` levels."""
    tokens = list(_leaves(node))

    parts: list[str] = []
    prev = None
    for i, tok in enumerate(tokens):
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None
        if tok.type == "," and (nxt is None or nxt.type in _CLOSERS):
            continue
        if prev is not None:
            parts.append(_separator(prev, tok))
        if tok.type in BODY_TYPES:
            parts.append(_layout_body(tok, source, indent))
        else:
            parts.append(node_text(tok, source))
        prev = tok
    return "".join(parts)


def _fits(text: str, limit: int) -> bool:
    return not any(c in text for c in "\t\v\f\n") and len(text.encode("utf-8")) <= limit


def _field_parts(decl: Any, source: bytes, indent: int) -> tuple[list[str], str, str]:
    names = [node_text(n, source) for n in decl.children_by_field_name("name")]
    type_node = decl.child_by_field_name("type")
    typ = _layout(type_node, source, indent) if type_node is not None else ""
    if not names and any(child.type == "*" for child in decl.children):
        typ = f"*{typ}"
    tag_node = decl.child_by_field_name("tag")
    tag = node_text(tag_node, source) if tag_node is not None else ""
    return names, typ, tag


def _one_line_member(member: Any, is_struct: bool, source: bytes, indent: int) -> str | None:
    """Return the member text if the body may stay on one line."""
    if is_struct:
        names, typ, tag = _field_parts(member, source, indent)
        if tag or not _fits(typ, ONE_LINE_MAX - (1 if names else 0)):
            return None
        return f"{', '.join(names)} {typ}" if names else typ

    text = _layout(member, source, indent)
    name = member.child_by_field_name("name")
    if name is not None:
        # Sized as the equivalent func type, plus one for the name
        size_text = "func" + text[len(node_text(name, source)) :]
        return text if _fits(size_text, ONE_LINE_MAX - 1) else None
    return text if _fits(text, ONE_LINE_MAX) else None


def _struct_member(member: Any, source: bytes, indent: int, sep: str) -> str:
    names, typ, tag = _field_parts(member, source, indent)
    if names:
        text = ", ".join(names) + sep + typ
        extra = 1
    else:
        text = typ
        extra = 2
    if tag:
        if names and sep == "\v":
            text += sep
        text += sep + tag
        extra = 0

    trailing = line_comments(member)
    if trailing:
        gap = sep * extra
        text += (gap if "\v" in gap else "\t") + "\t".join(node_text(c, source) for c in trailing)
    return text


def _interface_member(member: Any, source: bytes, indent: int) -> str:
    text = _layout(member, source, indent)
    trailing = line_comments(member)
    if trailing:
        text += "\t" + "\t".join(node_text(c, source) for c in trailing)
    return text


def _layout_body(node: Any, source: bytes, indent: int) -> str:
    """Lay out a struct or interface type the way go/printer does."""
    is_struct = node.type == "struct_type"
    keyword = "struct" if is_struct else "interface"

    container = node
    if is_struct:
        container = next(
            (c for c in node.named_children if c.type == "field_declaration_list"), None
        )
        if container is None:
            return keyword + "{}"
    if is_struct:
        members = [c for c in container.named_children if c.type == "field_declaration"]
    else:
        members = [c for c in container.named_children if c.type != COMMENT]
    lbrace = next((c for c in container.children if c.type == "{"), None)
    rbrace = next((c for c in reversed(container.children) if c.type == "}"), None)
    open_row = lbrace.start_point[0] if lbrace is not None else node.start_point[0]

    has_comments = any(c.type == COMMENT for c in container.children)
    if rbrace is not None and open_row == rbrace.start_point[0] and not has_comments:
        if not members:
            return keyword + "{}"
        if len(members) == 1:
            text = _one_line_member(members[0], is_struct, source, indent + 1)
            if text is not None:
                return f"{keyword}{{ {text} }}"

    pad = "\t" * (indent + 1)
    sep = "\v" if len(members) > 1 else " "
    out = [keyword, " {"]
    if members:
        out.append("\f")

    prev_row = open_row
    prev_multiline = False
    for i, member in enumerate(members):
        docs = doc_comments(member)
        first_row = (docs[0] if docs else member).start_point[0]
        breaks = min(max(first_row - prev_row, 1), 2)
        if i == 0:
            if docs and breaks > 1:
                out.append(pad + "\n")
        else:
            out.append("\f" if prev_multiline else "\n")
            if breaks > 1:
                out.append(pad + "\n")

        for comment in docs:
            out.append(pad + node_text(comment, source) + "\n")

        if is_struct:
            text = _struct_member(member, source, indent + 1, sep)
        else:
            text = _interface_member(member, source, indent + 1)
        out.append(pad + text)

        trailing = line_comments(member)
        prev_row = (trailing[-1] if trailing else member).end_point[0]
        prev_multiline = "\n" in text or "\f" in text

    out.append("\f" + "\t" * indent + "}")
    return "".join(out)


def _padding(text_width: int, cell_width: int) -> str:
    if cell_width == 0:
        return ""
    cell_width = -(-cell_width // TAB_WIDTH) * TAB_WIDTH
    return "\t" * -(-(cell_width - text_width) // TAB_WIDTH)


class _ColumnBlock:
    """Elastic tabstops over buffered lines (text/tabwriter semantics).

    Each line is a list of (text, hard_tab) cells; the last cell of a line is
    never part of a column. Contiguous lines sharing a column are padded to
    the widest cell plus one, rounded up to whole tabs. Columns made only of
    empty soft cells are dropped.
    """

    def __init__(self, lines: list[list[tuple[str, bool]]]) -> None:
        self.lines = lines
        self.widths: list[int] = []
        self.out: list[str] = []

    def render(self) -> list[str]:
        self._format(0, len(self.lines))
        return self.out

    def _format(self, line0: int, line1: int) -> None:
        column = len(self.widths)
        this = line0
        while this < line1:
            if column >= len(self.lines[this]) - 1:
                this += 1
                continue
            self._write(line0, this)
            line0 = this

            width = TAB_WIDTH
            discardable = True
            while this < line1 and column < len(self.lines[this]) - 1:
                text, hard = self.lines[this][column]
                width = max(width, len(text) + 1)
                if text or hard:
                    discardable = False
                this += 1

            self.widths.append(0 if discardable else width)
            self._format(line0, this)
            self.widths.pop()
            line0 = this
        self._write(line0, line1)

    def _write(self, line0: int, line1: int) -> None:
        for cells in self.lines[line0:line1]:
            parts = []
            for j, (text, _) in enumerate(cells):
                parts.append(text)
                if j < len(self.widths):
                    parts.append(_padding(len(text), self.widths[j]))
            self.out.append("".join(parts))


def align_cells(text: str) -> str:
    """Expand layout control characters into tab-aligned text.

    "\\t" and "\\v" end a cell (hard and soft), "\\n" ends a line and "\\f"
    ends a line and every open column. Trailing blanks are trimmed.
    """
    out: list[str] = []
    block: list[list[tuple[str, bool]]] = []
    cells: list[tuple[str, bool]] = []
    start = 0
    for i, ch in enumerate(text):
        if ch not in "\t\v\n\f":
            continue
        cells.append((text[start:i], ch == "\t"))
        start = i + 1
        if ch in "\n\f":
            block.append(cells)
            if ch == "\f" or len(cells) == 1:
                out.extend(_ColumnBlock(block).render())
                block = []
            cells = []
    cells.append((text[start:], False))
    block.append(cells)
    out.extend(_ColumnBlock(block).render())
    return "\n".join(line.rstrip(" \t") for line in out)


def render_expr(node: Any, source: bytes) -> str:
    """Render a type expression in its gofmt written form.

    Whitespace is normalized and comments between tokens are dropped. Inline
    struct and interface types keep one-line form only for a single short
    member written on one line; otherwise each member goes on its own line
    with tab-aligned columns, doc comments and trailing comments, e.g.
    ``struct {\\n\\tA\\tint\\n\\tB\\tstring\\n}``.

    Args:
        node: Expression node
        source: Source bytes the node was parsed from

    Returns:
        Rendered expression
    """
    return align_cells(_layout(node, source, 0))


# =============================================================================
# Receiver Unwrapping
# =============================================================================


def _first_named(node: Any) -> Any | None:
    for child in node.named_children:
        if child.type != COMMENT:
            return child
    return None


def receiver_base_name(node: Any | None, source: bytes) -> str:
    """Find the base type identifier of a receiver type expression.

    Unwraps pointers, generic instantiations (one or more type arguments)
    and parentheses in any combination: ``T``, ``*T``, ``T[K]``, ``*T[K, V]``,
    ``(*T)``.

    Returns:
        The identifier, or an empty string if the expression has no base
        identifier (e.g. a qualified type)
    """
    if node is None:
        return ""
    kind = node.type
    if kind in ("type_identifier", "identifier"):
        return node_text(node, source)
    if kind == "pointer_type" or kind == "parenthesized_type":
        return receiver_base_name(_first_named(node), source)
    if kind == "generic_type":
        return receiver_base_name(node.child_by_field_name("type"), source)
    return ""


# =============================================================================
# Doc Comments
# =============================================================================


def _prev_sibling(node: Any) -> Any | None:
    sibling = node.prev_sibling
    while sibling is not None and sibling.type in TERMINATORS:
        sibling = sibling.prev_sibling
    return sibling


def _next_sibling(node: Any) -> Any | None:
    sibling = node.next_sibling
    while sibling is not None and sibling.type in TERMINATORS:
        sibling = sibling.next_sibling
    return sibling


def doc_comments(node: Any) -> list[Any]:
    """Return the comment group documenting ``node``.

    The group is the run of adjacent comments whose last line is directly
    above the node. Comments trailing code on the previous line belong to
    that code and are not part of the group.
    """
    group: list[Any] = []
    expected_row = node.start_point[0] - 1
    sibling = _prev_sibling(node)
    while sibling is not None and sibling.type == COMMENT:
        if sibling.end_point[0] < expected_row or sibling.end_point[0] > expected_row + 1:
            break
        if not group and sibling.end_point[0] != expected_row:
            break
        group.insert(0, sibling)
        expected_row = sibling.start_point[0] - 1
        sibling = _prev_sibling(sibling)

    if sibling is not None:
        code_row = sibling.end_point[0]
        while group and group[0].start_point[0] == code_row:
            code_row = group[0].end_point[0]
            group.pop(0)
    return group


def line_comments(node: Any) -> list[Any]:
    """Return the comments trailing ``node`` on its last line.

    These are rendered inside inline struct and interface types; they are
    never used as documentation.
    """
    group: list[Any] = []
    row = node.end_point[0]
    sibling = _next_sibling(node)
    while sibling is not None and sibling.type == COMMENT and sibling.start_point[0] == row:
        group.append(sibling)
        row = sibling.end_point[0]
        sibling = _next_sibling(sibling)
    return group


def _is_directive(text: str) -> bool:
    return text.startswith(_DIRECTIVE_PREFIXES) or bool(_DIRECTIVE_RE.match(text))


def comment_text(comments: list[Any], source: bytes) -> str:
    """Render a comment group as documentation text.

    Comment markers are removed, along with one leading space after ``//``.
    Directive lines (``//go:generate``, ``//line``) are dropped, trailing
    whitespace is stripped and runs of blank lines collapse to one.
    """
    lines: list[str] = []
    for comment in comments:
        text = node_text(comment, source)
        if text.startswith("//"):
            body = text[2:]
            if body.startswith(" "):
                body = body[1:]
            elif body and _is_directive(body):
                continue
            lines.append(body)
        else:
            lines.extend(text[2:-2].split("\n"))

    out: list[str] = []
    for line in lines:
        line = line.rstrip(" \t\r\n")
        if line or (out and out[-1]):
            out.append(line)
    while out and not out[-1]:
        out.pop()
    return "\n".join(out).strip()


def doc_text(node: Any, source: bytes, fallback: Any | None = None) -> str:
    """Return the documentation of ``node``, falling back to ``fallback``'s doc."""
    comments = doc_comments(node)
    if comments:
        return comment_text(comments, source)
    if fallback is not None:
        return doc_text(fallback, source)
    return ""
