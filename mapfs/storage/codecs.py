"""Text codecs for the persisted filesystem.

A filesystem file holds one literal describing the whole tree. The
literal's format is picked from the file suffix:

    .edn          EDN (default)
    .json         JSON
    .yaml, .yml   YAML

In every format a map with a truthy ``tag`` entry (``:tag`` in EDN) is
stored as a leaf value, not a directory. In memory such a leaf is keyed
by plain names (``"tag"``); EDN writes its keys back as keywords, and
JSON and YAML write keywords and symbols as their names.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Callable, Dict, Type, Union

import edn_format
import yaml

from mapfs.vfs.base import DirectoryNode, LeafNode, Node
from mapfs.vfs.tree import LEAF_TAG, from_data, is_tagged, to_data

logger = logging.getLogger(__name__)

EDN_TAG = edn_format.Keyword(LEAF_TAG)

# Names that can be written as a bare EDN keyword
KEYWORD_NAME = re.compile(r"^[A-Za-z*!_?<>=][A-Za-z0-9*!_?<>=+\-.#']*$")


class CodecError(ValueError):
    """The file content cannot be converted to or from a tree."""
    pass


class Codec(ABC):
    """Converts a whole tree to and from one text literal."""

    name: str = ""
    suffixes: tuple = ()

    @abstractmethod
    def loads(self, text: str) -> DirectoryNode:
        """Parse text into a root directory.

        Raises:
            CodecError: If the text is malformed or not a map
        """
        pass

    @abstractmethod
    def dumps(self, root: DirectoryNode) -> str:
        """Serialize a root directory.

        Raises:
            CodecError: If a stored value has no representation
        """
        pass

    def _check_root(self, data: Any, tag_key: Any) -> None:
        if not isinstance(data, Mapping) or is_tagged(data, tag_key):
            raise CodecError(
                f"{self.name}: top-level value must be a map, "
                f"got {type(data).__name__}"
            )


def _decode_edn_key(key: Any) -> str:
    if isinstance(key, (edn_format.Keyword, edn_format.Symbol)):
        return key.name
    if isinstance(key, str):
        return key
    return str(key)


def _encode_edn_key(name: Any) -> Any:
    if isinstance(name, str) and KEYWORD_NAME.match(name):
        return edn_format.Keyword(name)
    return name


def _map_value(value: Any, key_fn: Callable[[Any], Any], item_fn: Callable[[Any], Any]) -> Any:
    """Rebuild nested collections, converting map keys with `key_fn`."""
    if isinstance(value, Mapping):
        return {key_fn(key): item_fn(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return tuple(item_fn(item) for item in value)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return [item_fn(item) for item in value]
    if isinstance(value, frozenset):
        return frozenset(item_fn(item) for item in value)
    return value


def _name_of(value: Any) -> Any:
    if isinstance(value, (edn_format.Keyword, edn_format.Symbol)):
        return value.name
    return value


def _decode_edn_value(value: Any) -> Any:
    """Turn EDN's immutable collections into plain ones.

    Vectors become lists and maps become dicts with keyword keys turned
    into names, so a tagged leaf carries ``"tag"`` like one built from
    Python data. EDN lists stay tuples so they are written back as lists.
    """
    return _map_value(value, _name_of, _decode_edn_value)


def _encode_edn_value(value: Any) -> Any:
    """Write map keys inside a leaf value as keywords where possible."""
    return _map_value(value, _encode_edn_key, _encode_edn_value)


def _plain_value(value: Any) -> Any:
    """Leaf value for JSON and YAML: keywords and symbols become names."""
    value = _name_of(value)
    if isinstance(value, tuple):
        return [_plain_value(item) for item in value]
    return _map_value(value, _plain_value, _plain_value)


def _parse_edn(text: str) -> Any:
    try:
        return edn_format.loads(text)
    except (edn_format.EDNDecodeError, SyntaxError, ValueError) as e:
        raise CodecError(f"edn: {e}") from e


def _edn_from_data(data: Any) -> Node:
    return from_data(data, EDN_TAG, key_fn=_decode_edn_key, value_fn=_decode_edn_value)


def _edn_to_data(node: Node) -> Any:
    return to_data(node, key_fn=_encode_edn_key, value_fn=_encode_edn_value)


class EdnCodec(Codec):
    """EDN literal, written on a single line."""

    name = "edn"
    suffixes = (".edn",)

    def loads(self, text: str) -> DirectoryNode:
        data = _parse_edn(text)
        self._check_root(data, EDN_TAG)
        return _edn_from_data(data)

    def dumps(self, root: DirectoryNode) -> str:
        try:
            return edn_format.dumps(_edn_to_data(root)) + "\n"
        except (TypeError, ValueError, NotImplementedError) as e:
            raise CodecError(f"edn: cannot encode value: {e}") from e


class JsonCodec(Codec):
    """JSON document."""

    name = "json"
    suffixes = (".json",)

    def __init__(self, indent: int = 2):
        self.indent = indent

    def loads(self, text: str) -> DirectoryNode:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CodecError(f"json: {e}") from e
        self._check_root(data, LEAF_TAG)
        return from_data(data)

    def dumps(self, root: DirectoryNode) -> str:
        try:
            data = to_data(root, value_fn=_plain_value)
            return json.dumps(data, indent=self.indent, ensure_ascii=False) + "\n"
        except (TypeError, ValueError) as e:
            raise CodecError(f"json: cannot encode value: {e}") from e


class YamlCodec(Codec):
    """YAML document."""

    name = "yaml"
    suffixes = (".yaml", ".yml")

    def loads(self, text: str) -> DirectoryNode:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CodecError(f"yaml: {e}") from e
        self._check_root(data, LEAF_TAG)
        return from_data(data)

    def dumps(self, root: DirectoryNode) -> str:
        try:
            return yaml.safe_dump(
                to_data(root, value_fn=_plain_value),
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            )
        except yaml.YAMLError as e:
            raise CodecError(f"yaml: cannot encode value: {e}") from e


CODECS: Dict[str, Type[Codec]] = {
    EdnCodec.name: EdnCodec,
    JsonCodec.name: JsonCodec,
    YamlCodec.name: YamlCodec,
}


def get_codec(name: str, json_indent: int = 2) -> Codec:
    """Get a codec by format name.

    Raises:
        CodecError: If the format is unknown
    """
    codec_class = CODECS.get(name.lower())
    if codec_class is None:
        raise CodecError(f"Unknown format: {name} (choose from {', '.join(CODECS)})")
    if codec_class is JsonCodec:
        return JsonCodec(indent=json_indent)
    return codec_class()


def codec_for_path(
    path: Union[str, Path],
    default_format: str = "edn",
    json_indent: int = 2,
) -> Codec:
    """Pick the codec for a file from its suffix."""
    suffix = Path(path).suffix.lower()
    for name, codec_class in CODECS.items():
        if suffix in codec_class.suffixes:
            return get_codec(name, json_indent=json_indent)

    logger.debug(f"No codec for suffix '{suffix}', using {default_format}")
    return get_codec(default_format, json_indent=json_indent)


def read_literal(text: str) -> Node:
    """Parse one EDN literal typed by the operator.

    Bare symbols are read as strings, so ``put greeting hello`` stores
    ``"hello"``.

    Raises:
        CodecError: If the text is empty or malformed
    """
    text = text.strip()
    if not text:
        raise CodecError("missing value")

    value = _parse_edn(text)
    if isinstance(value, edn_format.Symbol):
        value = value.name
    return _edn_from_data(value)


def format_value(value: Any) -> str:
    """Render a stored value (or node) as an EDN literal for display."""
    data = _edn_to_data(value) if isinstance(value, Node) else _encode_edn_value(value)
    try:
        return edn_format.dumps(data)
    except (TypeError, ValueError, NotImplementedError):
        return repr(data)
