"""
Chip input and parsed event models.
ChipInput is what the week-view scraper hands over, ParsedEvent is what
the extractor returns.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

DECLINE_MARKERS = ('declined', 'refusé')


def detect_declined(aria_label: Any = None, dataset: Any = None, declined: Any = False) -> bool:
    """
    Normalize the heterogeneous decline hints into one flag.

    Args:
        aria_label: Accessibility label of the chip, scanned for a decline marker
        dataset: Data attributes of the chip, checked for responseStatus
        declined: Explicit flag already computed by the caller (bool, int or "true")

    Returns:
        True if any hint says the viewer declined the event
    """
    if isinstance(declined, (bool, int)) and declined:
        return True
    if isinstance(declined, str) and declined.strip().lower() == 'true':
        return True
    if isinstance(aria_label, str):
        label = aria_label.lower()
        if any(marker in label for marker in DECLINE_MARKERS):
            return True
    if isinstance(dataset, Mapping):
        status = dataset.get('responseStatus')
        if isinstance(status, str) and status.strip().lower() == 'declined':
            return True
    return False


@dataclass
class ChipInput:
    """
    One calendar chip as scraped from the week view.
    Only `text` is required; the other fields are side-channel hints.
    """
    text: str
    aria_label: Optional[str] = None
    declined: bool = False
    attributes: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_hints(cls, text: str, aria_label: Any = None, dataset: Any = None,
                   declined: Any = False, attributes: Any = None) -> "ChipInput":
        """Build a chip, computing `declined` once from whatever hints exist."""
        return cls(
            text=text,
            aria_label=aria_label if isinstance(aria_label, str) else None,
            declined=detect_declined(aria_label, dataset, declined),
            attributes=dict(attributes) if isinstance(attributes, Mapping) else {},
        )

    @property
    def is_declined(self) -> bool:
        return detect_declined(self.aria_label, None, self.declined)


def coerce_chip(raw: Any) -> Optional[ChipInput]:
    """
    Accept a ChipInput, a bare string, or a dict shaped like the scraper output.
    Returns None for anything without usable text.
    """
    if isinstance(raw, ChipInput):
        return raw if isinstance(raw.text, str) else None
    if isinstance(raw, str):
        return ChipInput(text=raw)
    if isinstance(raw, Mapping):
        text = raw.get('text')
        if not isinstance(text, str):
            return None
        return ChipInput.from_hints(
            text,
            aria_label=raw.get('ariaLabel', raw.get('aria_label')),
            dataset=raw.get('dataset'),
            declined=raw.get('declined', False),
            attributes=raw.get('attributes'),
        )
    return None


@dataclass
class ParsedEvent:
    """
    Structured event extracted from one chip.
    Date fields are empty when the chip text carries no date.
    """
    title: str
    comment: str
    start_time: str              # HH:MM, 24h
    duration: int                # Minutes, never negative
    date: str = ''               # YYYY-MM-DD
    day_of_week: Optional[int] = None  # 0=Sunday
    day_name: str = ''

    def as_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys the UI side consumes."""
        return {
            'title': self.title,
            'comment': self.comment,
            'date': self.date,
            'dayOfWeek': self.day_of_week,
            'dayName': self.day_name,
            'startTime': self.start_time,
            'duration': self.duration,
        }
