"""Replace or insert the frontmatter block of a document.

Every "set a field" operation ends here, so a document always carries at most
one block and bytes outside the block span are never touched.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping

from plandoc.frontmatter.document import DELIMITER, locate_frontmatter
from plandoc.frontmatter.serializer import serialize_frontmatter
from plandoc.frontmatter.values import MapValue

logger = logging.getLogger(__name__)


def render_block(value: MapValue | Mapping[str, object]) -> str:
    """Return ``value`` serialized and wrapped in delimiter lines."""
    return f"{DELIMITER}\n{serialize_frontmatter(value)}\n{DELIMITER}"


def splice_frontmatter(text: str, value: MapValue | Mapping[str, object]) -> str:
    """Return ``text`` with its frontmatter block replaced by ``value``.

    Parameters
    ----------
    text:
        Full document text.
    value:
        The new top-level map.

    Returns
    -------
    str
        When ``text`` has a closed block, its span (both delimiters included)
        is replaced and everything else is kept byte for byte.  Otherwise the
        block is prepended, followed by a newline.
    """
    block = locate_frontmatter(text)
    rendered = render_block(value)
    if block is None or not block.closed:
        logger.debug("No frontmatter block found; prepending one")
        return f"{rendered}\n{text}"
    return text[: block.start] + rendered + text[block.end:]
