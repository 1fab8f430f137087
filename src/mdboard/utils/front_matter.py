"""YAML front matter splitting for include files."""

import logging
from typing import Any

import frontmatter
import yaml

logger = logging.getLogger(__name__)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split leading YAML front matter from text.

    Only a block that loads as a mapping counts as front matter; otherwise
    the text is returned unchanged so a leading ``---`` slide separator is
    not mistaken for a header.

    Returns:
        (metadata, body) - metadata is empty when there is no front matter
    """
    try:
        metadata, content = frontmatter.parse(text)
    except yaml.YAMLError as e:
        logger.debug("Ignoring unparseable front matter: %s", e)
        return {}, text

    if not metadata:
        return {}, text
    return dict(metadata), content


def strip_front_matter(text: str) -> str:
    """Text without its YAML front matter."""
    return split_front_matter(text)[1]
