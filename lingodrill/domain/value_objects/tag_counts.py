"""Tag usage counts for a language's stored cards."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TagCounts:
    """How many cards carry each tag, plus how many carry none."""

    tags: dict[str, int] = field(default_factory=dict)
    untagged: int = 0

    def to_dict(self) -> dict:
        return {
            "tags": [
                {"name": name, "count": count}
                for name, count in sorted(self.tags.items())
            ],
            "untagged": self.untagged,
        }
