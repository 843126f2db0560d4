"""Decode the value of a Rust string literal as written in an attribute."""

import re

RAW_STRING_RE = re.compile(r'^r(#*)"(.*)"\1$', re.DOTALL)
SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
    '"': '"',
}


def unescape_rust_string(literal: str) -> str:
    """Return the text of a ``"..."`` or ``r#"..."#`` literal.

    Unknown escapes are kept verbatim. Text that is not a string literal is
    returned stripped.
    """
    literal = literal.strip()
    raw = RAW_STRING_RE.match(literal)
    if raw:
        return raw.group(2)
    if len(literal) < 2 or not (literal.startswith('"') and literal.endswith('"')):
        return literal

    body = literal[1:-1]
    out: list[str] = []
    i = 0
    n = len(body)
    while i < n:
        c = body[i]
        if c != "\\" or i + 1 >= n:
            out.append(c)
            i += 1
            continue
        nxt = body[i + 1]
        if nxt in SIMPLE_ESCAPES:
            out.append(SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt == "x" and re.fullmatch(r"[0-9a-fA-F]{2}", body[i + 2 : i + 4]):
            out.append(chr(int(body[i + 2 : i + 4], 16)))
            i += 4
        elif nxt == "u" and body[i + 2 : i + 3] == "{":
            end = body.find("}", i + 3)
            digits = body[i + 3 : end].replace("_", "") if end != -1 else ""
            if end != -1 and re.fullmatch(r"[0-9a-fA-F]{1,6}", digits):
                out.append(chr(int(digits, 16)))
                i = end + 1
            else:
                out.append(body[i : i + 2])
                i += 2
        elif nxt == "\n":
            # Line continuation: skip the newline and leading whitespace.
            i += 2
            while i < n and body[i] in " \t\r\n":
                i += 1
        else:
            out.append(body[i : i + 2])
            i += 2
    return "".join(out)
