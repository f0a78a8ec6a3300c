"""``frontmatter`` commands: get, set, merge and validate."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from plandoc.commands.common import Payload, decode_value, error
from plandoc.documents import read_document, write_document
from plandoc.errors import DocumentNotFoundError, InvalidInputError
from plandoc.frontmatter import (
    FRONTMATTER_SCHEMAS,
    MapValue,
    from_plain,
    is_valid_key,
    parse_frontmatter,
    splice_frontmatter,
    to_plain,
    validate_frontmatter,
)

logger = logging.getLogger(__name__)


def _file_missing(exc: DocumentNotFoundError) -> Payload:
    return error("File not found", path=str(exc.path))


def _apply(current: MapValue, key: str, value: object) -> MapValue:
    if not is_valid_key(key):
        raise InvalidInputError(f"Invalid field name: {key!r}")
    # null removes the key
    if value is None:
        return current.without(key)
    return current.with_entry(key, from_plain(value))


def _write(path: Path, text: str, updated: MapValue) -> None:
    try:
        rewritten = splice_frontmatter(text, updated)
    except ValueError as exc:
        # nested keys and nested lists the block format cannot hold
        raise InvalidInputError(str(exc)) from exc
    write_document(path, rewritten)


def frontmatter_get(path: Path, field: str | None = None) -> Payload:
    """Return the whole frontmatter, or ``{field: value}`` for one field."""
    try:
        text = read_document(path)
    except DocumentNotFoundError as exc:
        return _file_missing(exc)
    frontmatter = parse_frontmatter(text)
    if field is None:
        return {key: to_plain(value) for key, value in frontmatter.entries}
    value = frontmatter.get(field)
    if value is None:
        return error("Field not found", field=field)
    return {field: to_plain(value)}


def frontmatter_set(path: Path, field: str, raw_value: str) -> Payload:
    """Set one field; ``raw_value`` is JSON-decoded when it is valid JSON.

    Raises
    ------
    InvalidInputError
        If the field name or the decoded value cannot be written back.
    """
    try:
        text = read_document(path)
    except DocumentNotFoundError as exc:
        return _file_missing(exc)
    value = decode_value(raw_value)
    updated = _apply(parse_frontmatter(text), field, value)
    _write(path, text, updated)
    return {"updated": True, "field": field, "value": value}


def frontmatter_merge(path: Path, data: str) -> Payload:
    """Shallow-merge the JSON object ``data`` into the frontmatter.

    Raises
    ------
    InvalidInputError
        If ``data`` is not a JSON object, or holds a key or nested list
        that cannot be written back.
    """
    try:
        incoming = json.loads(data)
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"Invalid JSON for --data: {exc.msg}") from exc
    if not isinstance(incoming, dict):
        raise InvalidInputError("Invalid JSON for --data: expected an object")
    try:
        text = read_document(path)
    except DocumentNotFoundError as exc:
        return _file_missing(exc)
    merged = parse_frontmatter(text)
    for key, value in incoming.items():
        merged = _apply(merged, str(key), value)
    _write(path, text, merged)
    logger.debug("Merged %d field(s) into %s", len(incoming), path)
    return {"merged": True, "fields": list(incoming)}


def frontmatter_validate(path: Path, schema: str) -> Payload:
    """Check the frontmatter against a required-field schema.

    Raises
    ------
    InvalidInputError
        If ``schema`` is not a known schema name.
    """
    if schema not in FRONTMATTER_SCHEMAS:
        available = ", ".join(FRONTMATTER_SCHEMAS)
        raise InvalidInputError(f"Unknown schema: {schema}. Available: {available}")
    try:
        text = read_document(path)
    except DocumentNotFoundError as exc:
        return _file_missing(exc)
    return validate_frontmatter(parse_frontmatter(text), schema).to_dict()
