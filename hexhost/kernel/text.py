"""Byte/text conversion for file contents and command output.

Contents are UTF-8; bytes that do not decode are kept as lone surrogates
(``surrogateescape``) so that reading and writing back reproduces the
original bytes and both backends return the same string for the same file.
"""

from __future__ import annotations

CONTENT_ENCODING = "utf-8"
CONTENT_ERRORS = "surrogateescape"


def decode_content(data: bytes) -> str:
    return data.decode(CONTENT_ENCODING, CONTENT_ERRORS)


def encode_content(text: str) -> bytes:
    return text.encode(CONTENT_ENCODING, CONTENT_ERRORS)


__all__ = ["CONTENT_ENCODING", "CONTENT_ERRORS", "decode_content", "encode_content"]
