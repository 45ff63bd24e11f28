"""Service for re-ranking candidate catalog items against a visitor's affinity profile."""
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Iterable, Mapping, Sequence

import numpy as np

from tvbingefriend_personalization_service.config import DEFAULT_RANKING_LIMIT
from tvbingefriend_personalization_service.models import AffinityProfile, Candidate

logger = logging.getLogger(__name__)

DEFAULT_RELEASE_DATE = "2000-01-01"
SCORE_FIELD = "ai_score"

_SECONDS_PER_DAY = 60 * 60 * 24
_FALLBACK_DATE = datetime.fromisoformat(DEFAULT_RELEASE_DATE).replace(tzinfo=UTC)
_PARTIAL_DATE_FORMATS = ("%Y-%m", "%Y")


@dataclass(frozen=True)
class RankingWeights:
    """Weights of the scoring signals."""

    popularity: float = 0.3
    rating_scale: float = 10.0  # vote_average is out of 10
    rating: float = 0.25
    media_affinity: float = 5.0
    genre_affinity: float = 4.0
    recency_bonus: float = 20.0
    recency_window_days: float = 90.0


DEFAULT_WEIGHTS = RankingWeights()


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-signal contributions to an item's score."""

    popularity: float
    rating: float
    media: float
    genre: float
    recency: float

    @property
    def total(self) -> float:
        return self.popularity + self.rating + self.media + self.genre + self.recency


def parse_release_date(value: str | None) -> datetime:
    """
    Parse a release or first-air date.

    Date-only and naive values are taken as UTC. Year-only ("2024") and
    year-month ("2024-05") values start at the first day of that period.
    Missing or unparsable values fall back to 2000-01-01, which is always
    outside the recency window.
    """
    if not value:
        return _FALLBACK_DATE
    value = value.strip()
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        parsed = _parse_partial_date(value)
        if parsed is None:
            return _FALLBACK_DATE
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_partial_date(value: str) -> datetime | None:
    for fmt in _PARTIAL_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


class RankingEngine:
    """
    Scores, deduplicates and orders a candidate pool.

    Pure: reads the items and the profile, returns new dicts, mutates nothing.
    """

    def __init__(self, weights: RankingWeights = DEFAULT_WEIGHTS, limit: int = DEFAULT_RANKING_LIMIT):
        """
        Initialize the ranking engine.

        Args:
            weights: Signal weights
            limit: Default shortlist size
        """
        self.weights = weights
        self.limit = limit

    def normalize(self, items: Iterable[Mapping[str, Any]]) -> list[Candidate]:
        return [Candidate.from_item(item) for item in items]

    def deduplicate(self, candidates: Iterable[Candidate]) -> list[Candidate]:
        """Keep the first candidate per id and media kind, in input order."""
        seen: set[str] = set()
        unique: list[Candidate] = []
        for candidate in candidates:
            if candidate.dedup_key in seen:
                continue
            seen.add(candidate.dedup_key)
            unique.append(candidate)
        return unique

    def score(
            self,
            candidate: Candidate,
            profile: AffinityProfile,
            now: datetime | None = None
    ) -> ScoreBreakdown:
        """
        Score one candidate.

        Args:
            candidate: Normalized candidate
            profile: Visitor affinity profile
            now: Evaluation instant (default: current UTC time)

        Returns:
            ScoreBreakdown with one contribution per signal
        """
        now = _as_utc(now)
        w = self.weights

        genre = 0.0
        for genre_id in candidate.genre_ids:
            genre += profile.genre_count(genre_id) * w.genre_affinity

        released = parse_release_date(candidate.effective_date)
        age_days = (now - released).total_seconds() / _SECONDS_PER_DAY

        return ScoreBreakdown(
            popularity=candidate.popularity * w.popularity,
            rating=candidate.vote_average * w.rating_scale * w.rating,
            media=profile.media_count(candidate.media_kind) * w.media_affinity,
            genre=genre,
            recency=w.recency_bonus if age_days < w.recency_window_days else 0.0,
        )

    def explain(
            self,
            items: Sequence[Mapping[str, Any]],
            profile: AffinityProfile,
            now: datetime | None = None
    ) -> list[tuple[dict[str, Any], ScoreBreakdown]]:
        """
        Rank the full pool and keep each item's score breakdown.

        Args:
            items: Candidate pool
            profile: Visitor affinity profile
            now: Evaluation instant (default: current UTC time)

        Returns:
            (scored item, breakdown) pairs in ranked order, not truncated
        """
        now = _as_utc(now)
        candidates = self.deduplicate(self.normalize(items))
        breakdowns = [self.score(candidate, profile, now) for candidate in candidates]

        # Stable so equal scores keep their post-dedup order
        scores = np.array([b.total for b in breakdowns], dtype=float)
        order = np.argsort(-scores, kind="stable")

        return [
            ({**candidates[idx].item, SCORE_FIELD: breakdowns[idx].total}, breakdowns[idx])
            for idx in order
        ]

    def rank(
            self,
            items: Sequence[Mapping[str, Any]],
            profile: AffinityProfile,
            limit: int | None = None,
            now: datetime | None = None
    ) -> list[dict[str, Any]]:
        """
        Produce the personalized shortlist.

        Args:
            items: Candidate pool (any order, may contain duplicates)
            profile: Visitor affinity profile
            limit: Shortlist size (default: engine limit)
            now: Evaluation instant (default: current UTC time)

        Returns:
            At most ``limit`` items, each the original fields plus ``ai_score``
        """
        if limit is None:
            limit = self.limit
        limit = max(limit, 0)

        ranked = self.explain(items, profile, now)
        logger.debug(f"Ranked {len(ranked)} unique candidates from {len(items)} items")
        return [scored for scored, _ in ranked[:limit]]


def _as_utc(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(UTC)
    return now if now.tzinfo is not None else now.replace(tzinfo=UTC)


def rank(
        items: Sequence[Mapping[str, Any]],
        profile: AffinityProfile,
        limit: int = DEFAULT_RANKING_LIMIT,
        now: datetime | None = None
) -> list[dict[str, Any]]:
    """Rank ``items`` against ``profile`` with the default weights."""
    return RankingEngine().rank(items, profile, limit=limit, now=now)
