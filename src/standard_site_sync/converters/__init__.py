"""Dialect conversion: Obsidian markdown to portable markdown and plain text."""

from .common import (
    MappingResolver,
    NullResolver,
    ResolvedWikilink,
    TransformResult,
    WikilinkResolver,
)
from .markdown_to_plaintext import markdown_to_plaintext
from .obsidian_to_markdown import ObsidianParser, transform_obsidian_markdown

__all__ = [
    "MappingResolver",
    "NullResolver",
    "ObsidianParser",
    "ResolvedWikilink",
    "TransformResult",
    "WikilinkResolver",
    "markdown_to_plaintext",
    "transform_obsidian_markdown",
]
