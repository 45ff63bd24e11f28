"""Visitor affinity profile built from observed interactions."""
from dataclasses import dataclass, field
from typing import Any, Mapping

MEDIA_SECTION = "media"
GENRE_SECTION = "genres"


class ProfileFormatError(ValueError):
    """Raised when a persisted profile payload does not have the expected shape."""


def _as_count(value: Any, where: str) -> int:
    # bool is an int subclass; a stored true/false is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProfileFormatError(f"{where}: count must be an integer, got {value!r}")
    if value < 0:
        raise ProfileFormatError(f"{where}: count must be non-negative, got {value}")
    return value


def _as_section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ProfileFormatError(f"'{name}' must be an object, got {type(section).__name__}")
    return section


@dataclass
class AffinityProfile:
    """
    Accumulated interaction counts per media kind and per genre.

    Counts only ever grow; nothing in this package decays or resets them.
    """

    media_affinity: dict[str, int] = field(default_factory=dict)
    genre_affinity: dict[int, int] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "AffinityProfile":
        return cls()

    def copy(self) -> "AffinityProfile":
        return AffinityProfile(
            media_affinity=dict(self.media_affinity),
            genre_affinity=dict(self.genre_affinity),
        )

    def media_count(self, media_kind: str) -> int:
        return self.media_affinity.get(media_kind, 0)

    def genre_count(self, genre_id: int) -> int:
        return self.genre_affinity.get(genre_id, 0)

    @property
    def is_empty(self) -> bool:
        return not self.media_affinity and not self.genre_affinity

    def to_dict(self) -> dict[str, dict[str, int]]:
        """
        Serialize to the persisted layout.

        Genre ids become string keys so the result is JSON-safe; the layout
        matches what the browser front end keeps under ``ai_prefs``.
        """
        return {
            MEDIA_SECTION: dict(self.media_affinity),
            GENRE_SECTION: {str(genre_id): count for genre_id, count in self.genre_affinity.items()},
        }

    @classmethod
    def from_dict(cls, data: Any) -> "AffinityProfile":
        """
        Rebuild a profile from its persisted layout.

        Args:
            data: Decoded JSON payload (``None`` reads as an empty profile)

        Returns:
            AffinityProfile

        Raises:
            ProfileFormatError: If the payload is not a valid profile
        """
        if data is None:
            return cls.empty()
        if not isinstance(data, Mapping):
            raise ProfileFormatError(f"profile must be an object, got {type(data).__name__}")

        media: dict[str, int] = {}
        for kind, count in _as_section(data, MEDIA_SECTION).items():
            media[str(kind)] = _as_count(count, f"{MEDIA_SECTION}.{kind}")

        genres: dict[int, int] = {}
        for raw_id, count in _as_section(data, GENRE_SECTION).items():
            try:
                genre_id = int(raw_id)
            except (TypeError, ValueError):
                raise ProfileFormatError(f"genre id must be an integer, got {raw_id!r}") from None
            genres[genre_id] = _as_count(count, f"{GENRE_SECTION}.{raw_id}")

        return cls(media_affinity=media, genre_affinity=genres)
