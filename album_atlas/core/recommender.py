"""
Album recommendations by weighted overlap with a seed album.

Each candidate is scored on four genre-overlap buckets, shared descriptors and
a positive rating delta; the structured breakdown is returned with the score so
the UI can explain every recommendation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

import config
from album_atlas.core.album import Album

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationWeights:
    genre_pp: float = config.DEFAULT_WEIGHTS["genre_pp"]  # primary-primary genre match
    genre_ps: float = config.DEFAULT_WEIGHTS["genre_ps"]  # primary-secondary, either direction
    genre_ss: float = config.DEFAULT_WEIGHTS["genre_ss"]  # secondary-secondary genre match
    descriptors: float = config.DEFAULT_WEIGHTS["descriptors"]
    rating: float = config.DEFAULT_WEIGHTS["rating"]


@dataclass(frozen=True)
class RecommendOptions:
    require_any_genre_overlap: bool = False
    exclude_same_artist: bool = False
    exclude_doubled_artist: bool = False


@dataclass(frozen=True)
class MatchBucket:
    """Shared labels for one overlap bucket and what they contributed."""
    count: int
    shared: tuple[str, ...]
    weight: float
    contribution: float


@dataclass(frozen=True)
class GenreMatches:
    primary_primary: MatchBucket
    primary_secondary: MatchBucket
    secondary_primary: MatchBucket
    secondary_secondary: MatchBucket
    total_contribution: float


@dataclass(frozen=True)
class RatingDelta:
    delta: float       # max(0, cand_avg - seed_avg)
    seed_avg: float
    cand_avg: float
    weight: float
    contribution: float


@dataclass(frozen=True)
class RecommendationReason:
    genre_matches: GenreMatches
    descriptor_overlap: MatchBucket
    rating_delta: RatingDelta
    total: float


@dataclass(frozen=True)
class Recommendation:
    album: Album
    score: float
    reason: RecommendationReason = field(compare=False)


def intersect_labels(seed_labels: Sequence[str], cand_labels: Sequence[str]) -> tuple[str, ...]:
    """Labels of ``seed_labels`` also present in ``cand_labels``, in seed order."""
    if not seed_labels or not cand_labels:
        return ()
    cand_set = set(cand_labels)
    return tuple(label for label in seed_labels if label in cand_set)


def _bucket(shared: tuple[str, ...], weight: float) -> MatchBucket:
    return MatchBucket(
        count=len(shared),
        shared=shared,
        weight=weight,
        contribution=len(shared) * weight,
    )


def score_candidate(
    seed: Album,
    candidate: Album,
    weights: RecommendationWeights = RecommendationWeights(),
) -> RecommendationReason:
    """
    Score one candidate against the seed.

    Args:
        seed: Album recommendations are relative to
        candidate: Album being scored
        weights: Per-factor weights

    Returns:
        Full contribution breakdown; ``total`` is the candidate's score
    """
    pp = _bucket(intersect_labels(seed.primary_genres, candidate.primary_genres), weights.genre_pp)
    ps = _bucket(intersect_labels(seed.primary_genres, candidate.secondary_genres), weights.genre_ps)
    sp = _bucket(intersect_labels(seed.secondary_genres, candidate.primary_genres), weights.genre_ps)
    ss = _bucket(intersect_labels(seed.secondary_genres, candidate.secondary_genres), weights.genre_ss)
    genre_total = pp.contribution + ps.contribution + sp.contribution + ss.contribution

    descriptors = _bucket(
        intersect_labels(seed.descriptors, candidate.descriptors), weights.descriptors
    )

    delta = max(0.0, candidate.avg_rating - seed.avg_rating)
    rating = RatingDelta(
        delta=delta,
        seed_avg=seed.avg_rating,
        cand_avg=candidate.avg_rating,
        weight=weights.rating,
        contribution=delta * weights.rating,
    )

    return RecommendationReason(
        genre_matches=GenreMatches(
            primary_primary=pp,
            primary_secondary=ps,
            secondary_primary=sp,
            secondary_secondary=ss,
            total_contribution=genre_total,
        ),
        descriptor_overlap=descriptors,
        rating_delta=rating,
        total=genre_total + descriptors.contribution + rating.contribution,
    )


def _shares_any_genre(seed: Album, candidate: Album) -> bool:
    seed_genres = set(seed.primary_genres) | set(seed.secondary_genres)
    return any(
        g in seed_genres
        for g in (*candidate.primary_genres, *candidate.secondary_genres)
    )


def recommend(
    seed: Album,
    pool: Iterable[Album],
    top_x: int,
    excluded_ids: Optional[Iterable[str]] = None,
    weights: Optional[RecommendationWeights] = None,
    options: Optional[RecommendOptions] = None,
) -> list[Recommendation]:
    """
    Rank candidate albums against a seed.

    Args:
        seed: Seed album
        pool: Candidate albums; the seed itself is always skipped
        top_x: Maximum number of results (negative means none)
        excluded_ids: Global ids that must not be recommended
        weights: Scoring weights (defaults from config)
        options: Pool filters and artist de-duplication

    Returns:
        Recommendations sorted by score desc, then avg rating desc, then
        rating count desc; at most ``top_x`` entries
    """
    weights = weights or RecommendationWeights()
    options = options or RecommendOptions()
    excluded = set(excluded_ids or ())

    candidates = [
        a for a in pool
        if a is not None and a.global_id != seed.global_id and a.global_id not in excluded
    ]

    if options.exclude_same_artist:
        candidates = [a for a in candidates if a.artist_id != seed.artist_id]

    if options.require_any_genre_overlap:
        candidates = [a for a in candidates if _shares_any_genre(seed, a)]

    recs = []
    for candidate in candidates:
        reason = score_candidate(seed, candidate, weights)
        recs.append(Recommendation(album=candidate, score=reason.total, reason=reason))

    recs.sort(key=lambda r: (-r.score, -r.album.avg_rating, -r.album.rating_count))

    if options.exclude_doubled_artist:
        seen_artists = set()
        deduped = []
        for rec in recs:
            if rec.album.artist_id not in seen_artists:
                deduped.append(rec)
                seen_artists.add(rec.album.artist_id)
        recs = deduped

    result = recs[:max(0, top_x)]
    logger.debug(
        f"Recommended {len(result)} of {len(candidates)} candidates for {seed.global_id}"
    )
    return result
