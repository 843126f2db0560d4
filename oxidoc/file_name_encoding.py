"""Logic for escaping item names into portable file names and back."""

import re

from oxidoc.errors import FilenameDecodeError

ESCAPE_RE = re.compile(r"%x([0-9A-Fa-f]{2});")


def needs_escape(c: str) -> bool:
    """Return True for Latin-1 characters that are not ASCII alphanumerics."""
    return ord(c) < 0x100 and not (c.isascii() and c.isalnum())


def encode_doc_filename(name: str) -> str:
    """Escape ``name`` so it is safe as a single path component.

    Every character below U+0100 that is not an ASCII letter or digit is
    written as ``%xHH;``. Other characters pass through unchanged.
    """
    return "".join(f"%x{ord(c):02X};" if needs_escape(c) else c for c in name)


def decode_doc_filename(encoded: str) -> str:
    """Reverse encode_doc_filename, rejecting malformed escapes."""
    out: list[str] = []
    i = 0
    while i < len(encoded):
        c = encoded[i]
        if c != "%":
            out.append(c)
            i += 1
            continue
        match = ESCAPE_RE.match(encoded, i)
        if match is None:
            msg = f"Malformed escape at offset {i} in {encoded!r}"
            raise FilenameDecodeError(msg)
        out.append(chr(int(match.group(1), 16)))
        i = match.end()
    return "".join(out)
