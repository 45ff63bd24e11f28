"""Candidate catalog items, normalized once at the ranking boundary."""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class MediaKind(str, Enum):
    MOVIE = "movie"
    TV = "tv"


def infer_media_kind(item: Mapping[str, Any]) -> str:
    """
    Resolve the media kind of a catalog item.

    An explicit ``media_type`` wins; otherwise items carrying a ``title`` are
    movies and everything else is TV (TV results carry ``name`` instead).
    """
    explicit = item.get("media_type")
    if isinstance(explicit, str) and explicit:
        return explicit
    return MediaKind.MOVIE.value if item.get("title") else MediaKind.TV.value


def _as_float(value: Any) -> float:
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(number) else number


def _as_genre_ids(value: Any) -> tuple[int, ...]:
    if not isinstance(value, (list, tuple)):
        return ()

    genre_ids = []
    for raw in value:
        if isinstance(raw, bool):
            continue
        if isinstance(raw, int):
            genre_ids.append(raw)
        elif isinstance(raw, str):
            try:
                genre_ids.append(int(raw))
            except ValueError:
                continue
    return tuple(genre_ids)


def _as_date_text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


@dataclass(frozen=True)
class Candidate:
    """A catalog item tagged with its media kind and its scoring fields read out."""

    item: Mapping[str, Any]
    id: Any
    media_kind: str
    genre_ids: tuple[int, ...]
    popularity: float
    vote_average: float
    effective_date: str | None

    @property
    def dedup_key(self) -> str:
        return f"{self.id}-{self.media_kind}"

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> "Candidate":
        """Normalize a raw catalog item; missing or malformed fields read as defaults."""
        return cls(
            item=item,
            id=item.get("id"),
            media_kind=infer_media_kind(item),
            genre_ids=_as_genre_ids(item.get("genre_ids")),
            popularity=_as_float(item.get("popularity")),
            vote_average=_as_float(item.get("vote_average")),
            effective_date=(
                _as_date_text(item.get("release_date")) or _as_date_text(item.get("first_air_date"))
            ),
        )
