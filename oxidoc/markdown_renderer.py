"""Logic for rendering doc-comment markdown as styled terminal text."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
RESET = "\x1b[0m"
BOLD = "\x1b[1m"
ITALIC = "\x1b[3m"
UNDERLINE = "\x1b[4m"
CODE = "\x1b[33m"
HEADING = "\x1b[1;36m"
DIM = "\x1b[2m"

FENCE_RE = re.compile(r"^\s*(```+|~~~+)\s*(.*)$")
HEADING_RE = re.compile(r"^\s{0,3}(#{1,6})\s+(.*?)\s*#*\s*$")
RULE_RE = re.compile(r"^\s{0,3}([-*_])(\s*\1){2,}\s*$")
LIST_RE = re.compile(r"^(\s*)([-*+]|\d+[.)])\s+(.*)$")
QUOTE_RE = re.compile(r"^\s{0,3}>\s?(.*)$")
INLINE_RE = re.compile(
    r"(?P<code>`+)(?P<code_text>.+?)(?P=code)"
    r"|\*\*(?P<bold>.+?)\*\*|__(?P<bold2>.+?)__"
    r"|\*(?P<em>[^*\s][^*]*?)\*|(?<!\w)_(?P<em2>[^_\s][^_]*?)_(?!\w)"
    r"|\[(?P<link>[^\]]+)\]\((?P<url>[^)\s]+)[^)]*\)"
    r"|\[`?(?P<ref>[^\]]+?)`?\](?!\()"
)
RUSTDOC_TAGS = {"ignore", "no_run", "should_panic", "compile_fail", "test_harness"}
# Narrowest budget the block markers and code indent fit into
MIN_WIDTH = 10


@dataclass
class RenderOptions:
    """Settings for one render call."""

    style: str = "monokai"
    default_language: str = "rust"
    color: bool = True
    # None means the width of the terminal
    width: int | None = None


def visible_len(text: str) -> int:
    """Return the printed width of ``text``, ignoring ANSI escapes."""
    return len(ANSI_RE.sub("", text))


def cut_visible(text: str, width: int) -> str:
    """Cut ``text`` to at most ``width`` printed characters."""
    out: list[str] = []
    seen = 0
    i = 0
    while i < len(text):
        match = ANSI_RE.match(text, i)
        if match:
            out.append(match.group(0))
            i = match.end()
            continue
        if seen >= width:
            break
        out.append(text[i])
        seen += 1
        i += 1
    return "".join(out)


def style(text: str, code: str, options: RenderOptions) -> str:
    return f"{code}{text}{RESET}" if options.color else text


def render_inline(text: str, options: RenderOptions) -> str:
    """Apply inline code, bold, emphasis and link styling."""

    def replace(match: re.Match[str]) -> str:
        if match.group("code_text") is not None:
            return style(match.group("code_text").strip(), CODE, options)
        bold = match.group("bold") or match.group("bold2")
        if bold is not None:
            return style(bold, BOLD, options)
        em = match.group("em") or match.group("em2")
        if em is not None:
            return style(em, ITALIC, options)
        if match.group("link") is not None:
            return style(match.group("link"), UNDERLINE, options)
        return style(match.group("ref"), UNDERLINE, options)

    return INLINE_RE.sub(replace, text)


def carry_styles(lines: list[str], options: RenderOptions) -> list[str]:
    """Close styles at line ends and reopen them on the next line."""
    if not options.color:
        return lines
    result: list[str] = []
    carry = ""
    for line in lines:
        line = carry + line
        active: list[str] = []
        for code in ANSI_RE.findall(line):
            if code == RESET:
                active = []
            else:
                active.append(code)
        if active:
            line += RESET
        carry = "".join(active)
        result.append(line)
    return result


def wrap(text: str, width: int, first_prefix: str = "", prefix: str = "") -> list[str]:
    """Word-wrap styled text so no line exceeds ``width`` printed columns.

    ``first_prefix`` leads the first line and ``prefix`` every later one.
    """
    width = max(width, visible_len(first_prefix) + 1, visible_len(prefix) + 1)
    lines: list[str] = []
    lead = first_prefix
    current = ""
    for word in text.split():
        if current and visible_len(lead) + visible_len(current) + 1 + visible_len(word) <= width:
            current = f"{current} {word}"
            continue
        if current:
            lines.append(lead + current)
            lead = prefix
            current = ""
        room = width - visible_len(lead)
        # Hard-cut words wider than a whole line.
        while visible_len(word) > room:
            head = cut_visible(word, room)
            lines.append(lead + head)
            lead = prefix
            room = width - visible_len(lead)
            word = word[len(head) :]
        current = word
    if current or not lines:
        lines.append(lead + current)
    return lines


def fence_language(info: str, default_language: str) -> str:
    """Pick the highlighter name from a fence info string."""
    for tag in re.split(r"[\s,]+", info.strip()):
        if not tag or tag in RUSTDOC_TAGS or tag.startswith("edition"):
            continue
        return tag
    return default_language


def render_code(code_lines: list[str], language: str, width: int, options: RenderOptions) -> list[str]:
    """Cut code lines to the width budget and highlight them."""
    indent = "  "
    if language == "rust":
        # rustdoc hides lines starting with "# "
        code_lines = [line for line in code_lines if not (line.strip() == "#" or line.lstrip().startswith("# "))]
    budget = max(width - len(indent), 1)
    cut = [line[:budget] for line in code_lines]
    if not options.color:
        return [indent + line for line in cut]
    try:
        lexer = get_lexer_by_name(language, stripnl=False)
    except ClassNotFound:
        try:
            lexer = get_lexer_by_name(options.default_language, stripnl=False)
        except ClassNotFound:
            return [indent + line for line in cut]
    highlighted = highlight("\n".join(cut) + "\n", lexer, Terminal256Formatter(style=options.style))
    return [indent + line for line in highlighted.rstrip("\n").split("\n")][: len(cut)]


class MarkdownRenderer:
    """Block-level renderer over the lines of a markdown document."""

    def __init__(self, width: int, options: RenderOptions | None = None) -> None:
        """Initialize the renderer with a line budget."""
        self.width = max(width, MIN_WIDTH)
        self.options = options or RenderOptions()

    def render(self, text: str) -> str:
        return "\n".join(self.render_lines(text.expandtabs(4).split("\n"), self.width)).rstrip("\n")

    def render_lines(self, lines: list[str], width: int) -> list[str]:
        out: list[str] = []
        i = 0
        while i < len(lines):
            line = lines[i]
            if not line.strip():
                i += 1
                continue
            if out:
                out.append("")
            fence = FENCE_RE.match(line)
            if fence:
                marker = fence.group(1)
                body: list[str] = []
                i += 1
                while i < len(lines) and not lines[i].strip().startswith(marker):
                    body.append(lines[i])
                    i += 1
                i += 1
                language = fence_language(fence.group(2), self.options.default_language)
                out.extend(render_code(body, language, width, self.options))
                continue
            if line.startswith("    "):
                body = []
                while i < len(lines) and (lines[i].startswith("    ") or not lines[i].strip()):
                    body.append(lines[i][4:])
                    i += 1
                while body and not body[-1].strip():
                    body.pop()
                out.extend(render_code(body, self.options.default_language, width, self.options))
                continue
            heading = HEADING_RE.match(line)
            if heading:
                text = render_inline(heading.group(2), self.options)
                out.extend(carry_styles(wrap(style(text, HEADING, self.options), width), self.options))
                if len(heading.group(1)) <= 2:
                    rule = "─" if self.options.color else "-"
                    out.append(rule * min(visible_len(text), width))
                i += 1
                continue
            if RULE_RE.match(line):
                out.append(style("─" * width, DIM, self.options) if self.options.color else "-" * width)
                i += 1
                continue
            if QUOTE_RE.match(line):
                quoted: list[str] = []
                while i < len(lines) and lines[i].strip() and QUOTE_RE.match(lines[i]):
                    quoted.append(QUOTE_RE.match(lines[i]).group(1))
                    i += 1
                bar = style("│", DIM, self.options) + " "
                out.extend(bar + inner for inner in self.render_lines(quoted, width - 2))
                continue
            if LIST_RE.match(line):
                i = self.render_list(lines, i, width, out)
                continue
            paragraph: list[str] = []
            while i < len(lines) and lines[i].strip() and not self.starts_block(lines[i]):
                paragraph.append(lines[i].strip())
                i += 1
            out.extend(carry_styles(wrap(render_inline(" ".join(paragraph), self.options), width), self.options))
        return out

    def starts_block(self, line: str) -> bool:
        return bool(
            FENCE_RE.match(line)
            or HEADING_RE.match(line)
            or RULE_RE.match(line)
            or QUOTE_RE.match(line)
            or LIST_RE.match(line)
        )

    def render_list(self, lines: list[str], i: int, width: int, out: list[str]) -> int:
        """Render consecutive list items starting at ``lines[i]``."""
        while i < len(lines):
            match = LIST_RE.match(lines[i])
            if match is None:
                break
            indent, marker, text = match.groups()
            parts = [text]
            i += 1
            while (
                i < len(lines)
                and lines[i].strip()
                and not LIST_RE.match(lines[i])
                and not FENCE_RE.match(lines[i])
            ):
                parts.append(lines[i].strip())
                i += 1
            bullet = "•" if marker in "-*+" else marker
            lead = " " * len(indent) + bullet + " "
            hanging = " " * visible_len(lead)
            item = render_inline(" ".join(parts), self.options)
            out.extend(carry_styles(wrap(item, width, lead, hanging), self.options))
            # a blank line between items keeps the list together
            if i + 1 < len(lines) and not lines[i].strip() and LIST_RE.match(lines[i + 1]):
                i += 1
        return i


def render(markdown_text: str, width: int, options: RenderOptions | None = None) -> str:
    """Render ``markdown_text`` to styled text no wider than ``width`` columns.

    Widths below ``MIN_WIDTH`` are raised to it, so the budget is
    ``max(width, MIN_WIDTH)``.
    """
    return MarkdownRenderer(width, options).render(markdown_text)
