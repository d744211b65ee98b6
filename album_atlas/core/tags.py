"""
Display tags explaining why an album was recommended.
"""

from dataclasses import dataclass

import config
from album_atlas.core.recommender import RecommendationReason
from album_atlas.core.seeded import seeded_random


@dataclass(frozen=True)
class Tag:
    label: str
    color: str = config.TAG_DEFAULT_COLOR


def get_tags_from_reason(reason: RecommendationReason, rng_seed: str = "seed") -> list[Tag]:
    """
    Pick up to ``config.MAX_TAGS_COUNT`` tags from a recommendation reason.

    Genre matches come first (primary-primary, then the cross buckets, then
    secondary-secondary), de-duplicated by label and capped at
    ``config.MAX_GENRE_TAGS``. Remaining slots go to shared descriptors in a
    reproducible shuffled order derived from ``rng_seed``.

    Args:
        reason: Breakdown returned with a recommendation
        rng_seed: Seed string, usually "{source_id}-{target_id}"

    Returns:
        Ordered list of tags
    """
    genres = reason.genre_matches
    ordered_genres = [
        *genres.primary_primary.shared,
        *genres.primary_secondary.shared,
        *genres.secondary_primary.shared,
        *genres.secondary_secondary.shared,
    ]

    genre_tags: list[Tag] = []
    seen = set()
    for label in ordered_genres:
        if label in seen:
            continue
        seen.add(label)
        genre_tags.append(Tag(label=label))
    genre_tags = genre_tags[:config.MAX_GENRE_TAGS]

    remaining = config.MAX_TAGS_COUNT - len(genre_tags)
    shuffled = sorted(
        reason.descriptor_overlap.shared,
        key=lambda d: seeded_random(f"{rng_seed}-{d}"),
    )
    descriptor_tags = [Tag(label=d) for d in shuffled[:remaining]]

    return genre_tags + descriptor_tags
