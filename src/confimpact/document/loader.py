"""Load configuration documents from disk.

Files are decoded by extension: ``.json`` with the strict JSON parser,
``.yaml``/``.yml`` with PyYAML's safe loader. Anything else must be valid
JSON. The result is always a plain ``dict`` tree of mappings, lists and
scalars with string keys and finite numbers.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

import yaml
from yaml.constructor import ConstructorError

from confimpact.exceptions import DocumentNotFoundError, ParseError, UnsupportedFormatError

logger = logging.getLogger("confimpact.document")

JSON_EXTENSIONS = {".json"}
YAML_EXTENSIONS = {".yaml", ".yml"}


class _ConfigYamlLoader(yaml.SafeLoader):
    """Safe loader for config documents.

    Timestamps stay plain strings, mapping keys are stringified as they are
    inserted and ``.nan``/``.inf`` are rejected.
    """

    def construct_mapping(self, node, deep=False):
        if not isinstance(node, yaml.MappingNode):
            raise ConstructorError(
                None, None, f"expected a mapping node, but found {node.id}", node.start_mark
            )
        explicit = {id(key_node) for key_node, _ in node.value}
        self.flatten_mapping(node)

        mapping: dict[str, Any] = {}
        seen: set[str] = set()
        for key_node, value_node in node.value:
            key = _key_str(self.construct_object(key_node, deep=deep))
            # merged (<<) entries may be overridden, explicit ones may not
            if id(key_node) in explicit:
                if key in seen:
                    raise ConstructorError(
                        "while constructing a mapping", node.start_mark,
                        f"duplicate key {key!r}", key_node.start_mark,
                    )
                seen.add(key)
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping

    def construct_yaml_float(self, node):
        value = super().construct_yaml_float(node)
        if not math.isfinite(value):
            raise ConstructorError(
                None, None, f"{node.value!r} is not a finite number", node.start_mark
            )
        return value


_ConfigYamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_ConfigYamlLoader.add_constructor(
    "tag:yaml.org,2002:float", _ConfigYamlLoader.construct_yaml_float
)


def detect_format(file_path: str | Path) -> str | None:
    """Return "json" or "yaml" for known extensions, None otherwise."""
    ext = Path(file_path).suffix.lower()
    if ext in JSON_EXTENSIONS:
        return "json"
    if ext in YAML_EXTENSIONS:
        return "yaml"
    return None


def load_document(file_path: str | Path) -> dict[str, Any]:
    """Read a file and decode it into a document tree."""
    path = Path(file_path)
    if not path.is_file():
        raise DocumentNotFoundError(f"File not found: {file_path}")

    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(
            f"{path.name}: not valid UTF-8 (byte {e.start}: {e.reason})"
        ) from e

    fmt = detect_format(path)
    data = parse_text(content, fmt, source=path.name)
    logger.debug(f"Loaded {path} ({fmt or 'json'}, {len(data)} top-level keys)")
    return data


def parse_text(content: str, fmt: str | None = "json", source: str = "<string>") -> dict[str, Any]:
    """Decode document text.

    `fmt` is "json", "yaml" or None for an unknown format, which must then
    be JSON. `source` names the document in error messages.
    """
    if fmt == "yaml":
        data = _parse_yaml(content, source)
    elif fmt == "json":
        data = _parse_json(content, source)
    else:
        try:
            data = _decode_json(content)
        except json.JSONDecodeError as e:
            raise UnsupportedFormatError(
                f"Unsupported format: {source} is neither .json nor .yaml and not valid JSON"
            ) from e
        except ValueError as e:
            raise ParseError(f"{source}: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(f"{source}: top level must be a mapping, got {type(data).__name__}")
    return data


def _decode_json(content: str) -> Any:
    return json.loads(content, parse_constant=_reject_constant, parse_float=_finite_float)


def _parse_json(content: str, source: str) -> Any:
    try:
        return _decode_json(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"{source}: invalid JSON at line {e.lineno}: {e.msg}") from e
    except ValueError as e:
        raise ParseError(f"{source}: {e}") from e


def _parse_yaml(content: str, source: str) -> Any:
    try:
        data = yaml.load(content, Loader=_ConfigYamlLoader)
    except yaml.YAMLError as e:
        raise ParseError(f"{source}: invalid YAML: {_first_line(e)}") from e
    # Empty file
    return {} if data is None else data


def _reject_constant(name: str) -> float:
    raise ValueError(f"invalid JSON: {name} is not a JSON number")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"invalid JSON: {text} is out of range")
    return value


def _key_str(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _first_line(error: Exception) -> str:
    text = str(error).strip()
    return text.splitlines()[0] if text else error.__class__.__name__
