"""Preset quote tags and tag classification."""

from enum import Enum
from typing import Tuple


class TagSource(str, Enum):
    """Where a tag comes from."""

    PRESET = "preset"
    CUSTOM = "custom"


# Emotions and themes offered in the tag picker
VALID_TAGS: Tuple[str, ...] = (
    "joy",
    "gratitude",
    "hope",
    "love",
    "courage",
    "resilience",
    "contentment",
    "serenity",
    "compassion",
    "kindness",
    "wisdom",
    "curiosity",
    "ambition",
    "perseverance",
    "confidence",
    "friendship",
    "forgiveness",
    "humility",
    "inspiration",
    "motivation",
    "optimism",
    "patience",
    "mindfulness",
    "nostalgia",
    "melancholy",
)

_VALID_TAG_SET = frozenset(VALID_TAGS)


def is_valid_tag(tag: str) -> bool:
    """True if the tag is one of the presets (exact, case-sensitive match)."""
    return tag in _VALID_TAG_SET


def get_tag_source(tag: str) -> str:
    """Classify any string as a preset or custom tag."""
    if is_valid_tag(tag):
        return TagSource.PRESET.value
    return TagSource.CUSTOM.value
