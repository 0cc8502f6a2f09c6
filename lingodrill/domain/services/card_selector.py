"""Card selector service for building a session's deck."""

import logging
import random
from collections.abc import Sequence
from dataclasses import replace

from lingodrill.domain.entities.card import Card
from lingodrill.domain.value_objects.card_filter import CardFilter
from lingodrill.ports.card_store import CardStore

logger = logging.getLogger(__name__)


class CardSelector:
    """Builds the ordered list of card ids for a new session.

    Two sources:
    - Built-in sample deck: filtered by language, first max_cards in bundle
      order, saved to storage on first use so later lookups succeed
    - Stored cards: filtered by language and tags, randomly sampled down to
      max_cards when there are more matches
    """

    def __init__(
        self,
        card_store: CardStore,
        sample_cards: Sequence[Card] = (),
        sample_target_language: str | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize card selector.

        Args:
            card_store: Storage port for cards
            sample_cards: Bundled sample deck
            sample_target_language: Language of the deck's reference
                translations (None trusts them for every target)
            rng: Random source for sampling (module-level random by default)
        """
        self._card_store = card_store
        self._sample_cards = list(sample_cards)
        self._sample_target_language = sample_target_language
        self._rng = rng or random.Random()

    async def select_cards(
        self,
        source_language: str,
        target_language: str,
        max_cards: int,
        use_built_in_deck: bool = True,
        tags: Sequence[str] | None = None,
        include_untagged: bool = False,
    ) -> list[str]:
        """Select card ids for a new session.

        Args:
            source_language: Language of the card content
            target_language: Language the learner translates into
            max_cards: Upper bound on deck size
            use_built_in_deck: Use the bundled sample deck instead of stored cards
            tags: Stored-card tags to match (any of them)
            include_untagged: Also match stored cards with no tags

        Returns:
            Card ids, at most max_cards (may be empty)

        Raises:
            ValueError: If max_cards is negative
        """
        if max_cards < 0:
            raise ValueError(f"max_cards must be >= 0, got {max_cards}")

        if use_built_in_deck:
            card_ids = await self._select_sample_cards(
                source_language, target_language, max_cards
            )
        else:
            card_ids = await self._select_stored_cards(
                source_language, max_cards, list(tags or []), include_untagged
            )

        logger.info(
            f"Selected {len(card_ids)} cards for {source_language}->{target_language} session",
            extra={"built_in_deck": use_built_in_deck, "max_cards": max_cards},
        )
        return card_ids

    async def _select_sample_cards(
        self, source_language: str, target_language: str, max_cards: int
    ) -> list[str]:
        cards = [c for c in self._sample_cards if c.source_language == source_language]
        card_ids = []
        for card in cards[:max_cards]:
            card = self._sample_card_for(card, target_language)
            if await self._card_store.get_card(card.id) is None:
                await self._card_store.save_card(card)
            card_ids.append(card.id)
        return card_ids

    async def _select_stored_cards(
        self,
        source_language: str,
        max_cards: int,
        tags: list[str],
        include_untagged: bool,
    ) -> list[str]:
        card_filter = CardFilter(
            source_language=source_language,
            tags=tuple(tags),
            include_untagged=include_untagged,
        )
        logger.debug(f"Fetching cards with filter: {card_filter}")

        matching = await self._card_store.get_all_cards(card_filter)
        logger.info(f"Found {len(matching)} matching cards in storage")

        if len(matching) > max_cards:
            selected = self.get_random_sample(matching, max_cards)
        else:
            selected = matching
        return [card.id for card in selected]

    def get_random_sample(self, cards: Sequence[Card], count: int) -> list[Card]:
        """Uniform random sample without replacement."""
        return self._rng.sample(list(cards), min(count, len(cards)))

    def _sample_card_for(self, card: Card, target_language: str) -> Card:
        if self._sample_target_language in (None, target_language):
            return card
        return replace(card, id=f"{card.id}-{target_language}", user_translation="")
