"""Card filter value object used to query stored cards."""

from dataclasses import dataclass, field

from lingodrill.domain.entities.card import Card


@dataclass(frozen=True)
class CardFilter:
    """Selection criteria for stored cards.

    Tag matching uses OR semantics: a card matches when it carries any of
    the requested tags, or when include_untagged is set and it has no tags.
    When neither tags nor include_untagged is given, every card of the
    language matches.
    """

    source_language: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    include_untagged: bool = False
    limit: int | None = None

    @property
    def filters_by_tag(self) -> bool:
        return bool(self.tags) or self.include_untagged

    def matches(self, card: Card) -> bool:
        """Check a card against language and tag criteria (limit not applied)."""
        if self.source_language and card.source_language != self.source_language:
            return False
        if not self.filters_by_tag:
            return True
        if self.include_untagged and card.is_untagged:
            return True
        return any(tag in self.tags for tag in card.tags)
