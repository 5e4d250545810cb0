"""Common types for dialect conversion."""

from dataclasses import dataclass, field
from typing import Mapping, Protocol, runtime_checkable


@dataclass(frozen=True)
class ResolvedWikilink:
    """Where a ``[[wikilink]]`` target is published.

    Attributes:
        path: Document path of the target note (e.g. ``"/blog/post"``).
        uri: AT-URI of the target's document record, only when the target
            has already been published and carries an rkey.
    """

    path: str
    uri: str | None = None


@runtime_checkable
class WikilinkResolver(Protocol):
    """Capability passed to the transformer to look up link targets.

    ``resolve`` must be a pure lookup: returning ``None`` means the target
    is unknown or unpublished and the link is downgraded to plain text.
    """

    def resolve(self, target: str) -> ResolvedWikilink | None: ...


class NullResolver:
    """Resolver that knows no targets; every wikilink becomes plain text."""

    def resolve(self, target: str) -> ResolvedWikilink | None:
        return None


class MappingResolver:
    """Resolver backed by a fixed ``target -> ResolvedWikilink`` mapping."""

    def __init__(self, links: Mapping[str, ResolvedWikilink]) -> None:
        self._links = dict(links)

    def resolve(self, target: str) -> ResolvedWikilink | None:
        return self._links.get(target)


@dataclass
class TransformResult:
    """Result of converting dialect markdown to portable markdown.

    Attributes:
        text: Portable (GFM) markdown.
        references: ``{"uri": ...}`` entries for every resolved link whose
            target is itself a published record, in document order.
        warnings: Link targets that could not be resolved.
    """

    text: str
    references: list[dict[str, str]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
