"""Frontmatter: the metadata block at the head of a planning document.

Exports the value model, the parser, the serializer and the splicer.
"""
from __future__ import annotations

from plandoc.frontmatter.document import (
    DELIMITER,
    FrontmatterBlock,
    locate_frontmatter,
    strip_frontmatter,
)
from plandoc.frontmatter.parser import (
    FrontmatterParser,
    extract_frontmatter,
    parse_frontmatter,
    parse_inline_list,
)
from plandoc.frontmatter.schemas import FRONTMATTER_SCHEMAS, SchemaReport, validate_frontmatter
from plandoc.frontmatter.serializer import serialize_frontmatter
from plandoc.frontmatter.splicer import render_block, splice_frontmatter
from plandoc.frontmatter.values import (
    ListValue,
    MapValue,
    PlainValue,
    Scalar,
    Value,
    from_plain,
    is_valid_key,
    to_plain,
)

__all__ = [
    # Value model
    "Scalar",
    "ListValue",
    "MapValue",
    "Value",
    "PlainValue",
    "to_plain",
    "from_plain",
    "is_valid_key",
    # Locating
    "DELIMITER",
    "FrontmatterBlock",
    "locate_frontmatter",
    "strip_frontmatter",
    # Parsing and writing
    "FrontmatterParser",
    "parse_frontmatter",
    "extract_frontmatter",
    "parse_inline_list",
    "serialize_frontmatter",
    "render_block",
    "splice_frontmatter",
    # Schemas
    "FRONTMATTER_SCHEMAS",
    "SchemaReport",
    "validate_frontmatter",
]
