"""Persistence of the filesystem tree as a single text literal."""

from mapfs.storage.codecs import (
    Codec,
    CodecError,
    EdnCodec,
    JsonCodec,
    YamlCodec,
    codec_for_path,
    format_value,
    get_codec,
    read_literal,
)
from mapfs.storage.persistence import PersistenceManager

__all__ = [
    "PersistenceManager",
    "Codec",
    "CodecError",
    "EdnCodec",
    "JsonCodec",
    "YamlCodec",
    "codec_for_path",
    "get_codec",
    "format_value",
    "read_literal",
]
