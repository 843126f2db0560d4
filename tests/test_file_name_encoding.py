"""Tests for the escaping of item names into file names."""

import pytest

from oxidoc.errors import FilenameDecodeError
from oxidoc.file_name_encoding import decode_doc_filename, encode_doc_filename


def test_encode_escapes_punctuation() -> None:
    """Verify that non-alphanumeric Latin-1 characters are escaped."""
    encoded = encode_doc_filename("the-unescaped_method%name")
    assert encoded == "the%x2D;unescaped%x5F;method%x25;name"


def test_decode_reverses_encode() -> None:
    """Verify that decoding restores the original name."""
    assert decode_doc_filename("the%x2D;unescaped%x5F;method%x25;name") == "the-unescaped_method%name"


def test_non_latin_characters_pass_through() -> None:
    """Verify that characters above U+00FF are kept as they are."""
    assert encode_doc_filename("Ω") == "Ω"
    assert encode_doc_filename("é") == "%xE9;"


def test_alphanumerics_are_unchanged() -> None:
    """Verify that plain identifiers are not escaped."""
    assert encode_doc_filename("MyStruct2") == "MyStruct2"


@pytest.mark.parametrize("bad", ["abc%", "abc%x2", "abc%x2D", "abc%y2D;", "%xZZ;"])
def test_decode_rejects_malformed_escapes(bad: str) -> None:
    """Verify that truncated or malformed escapes raise."""
    with pytest.raises(FilenameDecodeError):
        decode_doc_filename(bad)
