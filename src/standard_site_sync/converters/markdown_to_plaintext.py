"""Portable markdown to plain text for search and previews."""

import re

# Ordered (pattern, replacement) pairs. Emphasis is unwrapped from the
# widest marker down so ``***x***`` is not left as ``*x*``.
_PLAINTEXT_PASSES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"```\w*\n(.*?)```", re.DOTALL), r"\1"),
    (re.compile(r"^#{1,6}[ \t]+", re.MULTILINE), ""),
    (re.compile(r"!\[([^\]]*)\]\([^)]*\)"), r"\1"),
    (re.compile(r"\[([^\]]*)\]\([^)]*\)"), r"\1"),
    (re.compile(r"\*\*\*(.*?)\*\*\*"), r"\1"),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"`([^`]+)`"), r"\1"),
    (re.compile(r"<[^>]+>"), ""),
    (re.compile(r"^[ \t]*[-*+][ \t]+", re.MULTILINE), ""),
    (re.compile(r"^[ \t]*\d+\.[ \t]+", re.MULTILINE), ""),
    (re.compile(r"^>[ \t]?", re.MULTILINE), ""),
    (re.compile(r"\n{3,}"), "\n\n"),
]


def markdown_to_plaintext(markdown: str) -> str:
    """Strip markdown syntax, keeping visible text in reading order.

    Examples:
        >>> markdown_to_plaintext("# H\\n\\n**b**")
        'H\\n\\nb'
    """
    text = markdown
    for pattern, replacement in _PLAINTEXT_PASSES:
        text = pattern.sub(replacement, text)
    return text.strip()
