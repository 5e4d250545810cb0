"""Obsidian-flavoured markdown to portable markdown using regex passes."""

import logging
import re

from .common import TransformResult, WikilinkResolver

logger = logging.getLogger(__name__)

# %% on its own line, anything, %% on its own line
_BLOCK_COMMENT_RE = re.compile(r"%%\n.*?\n%%", re.DOTALL)
# %%inline%% (never spans lines)
_INLINE_COMMENT_RE = re.compile(r"%%.*?%%")
_HIGHLIGHT_RE = re.compile(r"==(.*?)==")
# ![[image.png]] / ![[doc.pdf|alt]]
_EMBED_RE = re.compile(r"!\[\[.*?\]\]")
# > [!note] Title   /   > [!tip]- Folded title
_CALLOUT_RE = re.compile(
    r"^(>[ \t]*)\[!(\w+)\][+-]?[ \t]*(.*)", re.MULTILINE
)
# [[target]] / [[target|display]]
_WIKILINK_RE = re.compile(r"\[\[([^\]|]+)(?:\|([^\]]+))?\]\]")


class ObsidianParser:
    """Convert the author-facing dialect into GFM.

    Passes run in a fixed order so later passes never see syntax that an
    earlier pass already consumed. Markdown the parser does not target
    passes through unchanged.
    """

    def __init__(self, resolver: WikilinkResolver):
        self.resolver = resolver
        self.references: list[dict[str, str]] = []
        self.warnings: list[str] = []

    def parse(self, text: str) -> TransformResult:
        """Run all passes over *text*.

        Args:
            text: Note body with frontmatter already removed.

        Returns:
            TransformResult with portable markdown and collected references.
        """
        self.references = []
        self.warnings = []

        text = self._remove_comments(text)
        text = self._convert_highlights(text)
        text = self._remove_embeds(text)
        text = self._convert_callouts(text)
        text = self._convert_wikilinks(text)

        return TransformResult(
            text=text,
            references=self.references,
            warnings=self.warnings,
        )

    def _remove_comments(self, text: str) -> str:
        text = _BLOCK_COMMENT_RE.sub("", text)
        return _INLINE_COMMENT_RE.sub("", text)

    def _convert_highlights(self, text: str) -> str:
        return _HIGHLIGHT_RE.sub(r"<mark>\1</mark>", text)

    def _remove_embeds(self, text: str) -> str:
        return _EMBED_RE.sub("", text)

    def _convert_callouts(self, text: str) -> str:
        """Flatten callouts to a plain quote, bolding the title if any."""

        def _replace(match: re.Match) -> str:
            prefix, title = match.group(1), match.group(3)
            return f"{prefix}**{title}**" if title else prefix

        return _CALLOUT_RE.sub(_replace, text)

    def _convert_wikilinks(self, text: str) -> str:
        def _replace(match: re.Match) -> str:
            target, display = match.group(1), match.group(2)
            label = display or target.split("/")[-1] or target

            resolved = self.resolver.resolve(target)
            if resolved is None:
                logger.debug("Unresolved wikilink: %s", target)
                self.warnings.append(
                    f"Unresolved wikilink [[{target}]] rendered as plain text"
                )
                return label

            if resolved.uri:
                self.references.append({"uri": resolved.uri})
            return f"[{label}]({resolved.path})"

        return _WIKILINK_RE.sub(_replace, text)


def transform_obsidian_markdown(
    text: str, resolver: WikilinkResolver
) -> TransformResult:
    """Convert dialect markdown to portable markdown.

    Args:
        text: Note body in the author dialect.
        resolver: Capability used to look up ``[[wikilink]]`` targets.

    Returns:
        TransformResult with ``text`` and ``references``.

    Examples:
        >>> from standard_site_sync.converters.common import NullResolver
        >>> transform_obsidian_markdown("==hi==", NullResolver()).text
        '<mark>hi</mark>'
    """
    return ObsidianParser(resolver).parse(text)
