"""Card entity representing a single vocabulary flashcard."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, TypedDict
from uuid import uuid4


class CardDict(TypedDict):
    """Card data structure for serialization."""

    id: str
    content: str
    source_language: str
    comment: str
    user_translation: str
    tags: list[str]
    created_at: str
    updated_at: str


def normalize_tags(tags: list[str] | tuple[str, ...] | set[str] | None) -> list[str]:
    """Strip, drop empties and de-duplicate tags while keeping first-seen order."""
    seen: list[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen.append(cleaned)
    return seen


@dataclass
class Card:
    """Vocabulary flashcard.

    Attributes:
        id: Unique card identifier
        content: Word, phrase or sentence to translate
        source_language: ISO code of the content's language
        comment: Optional learner note
        user_translation: Optional author-supplied reference translation
        tags: Tags used for deck selection (no duplicates)
        created_at: Creation timestamp
        updated_at: Last modification timestamp
    """

    content: str
    source_language: str = "en"
    comment: str = ""
    user_translation: str = ""
    tags: list[str] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.tags = normalize_tags(self.tags)

    @property
    def is_untagged(self) -> bool:
        """Check if card carries no tags."""
        return not self.tags

    @property
    def has_user_translation(self) -> bool:
        """Check if the author supplied a reference translation."""
        return bool(self.user_translation and self.user_translation.strip())

    def update(
        self,
        *,
        content: str | None = None,
        source_language: str | None = None,
        comment: str | None = None,
        user_translation: str | None = None,
        tags: list[str] | None = None,
    ) -> None:
        """Apply the given field changes and refresh updated_at.

        Fields left as None are unchanged.
        """
        if content is not None:
            self.content = content
        if source_language is not None:
            self.source_language = source_language
        if comment is not None:
            self.comment = comment
        if user_translation is not None:
            self.user_translation = user_translation
        if tags is not None:
            self.tags = normalize_tags(tags)
        self.updated_at = datetime.now(UTC)

    def to_dict(self) -> CardDict:
        """Convert card to dictionary for storage and API responses."""
        return {
            "id": self.id,
            "content": self.content,
            "source_language": self.source_language,
            "comment": self.comment,
            "user_translation": self.user_translation,
            "tags": list(self.tags),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        """Create from dictionary."""
        now = datetime.now(UTC)
        return cls(
            id=data["id"],
            content=data.get("content", ""),
            source_language=data.get("source_language", "en"),
            comment=data.get("comment") or "",
            user_translation=data.get("user_translation") or "",
            tags=list(data.get("tags") or []),
            created_at=_parse_datetime(data.get("created_at")) or now,
            updated_at=_parse_datetime(data.get("updated_at")) or now,
        )


def _parse_datetime(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)
