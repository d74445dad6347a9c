import logging
import math
from pydantic import BaseModel, ConfigDict
from typing import List, Mapping, Optional, Sequence

from .models import Archetype

logger = logging.getLogger(__name__)

VETO_THRESHOLD = 30.0
CENTRIST_PENALTY = 10000.0
CENTRIST_MARKERS = ("中间派", "centrist")
MATCH_SCALE = 2.5


class Match(BaseModel):
    model_config = ConfigDict(frozen=True)

    archetype: Archetype
    distance: float          # effective distance used for ranking
    raw_distance: float      # Euclidean distance before any veto penalty
    shared_axes: int
    catalog_index: int

    @property
    def penalized(self) -> bool:
        return self.distance != self.raw_distance


def match_percentage(distance: float, scale: float = MATCH_SCALE) -> float:
    """Display-only similarity: ``max(0, 100 - distance / scale)``."""
    return max(0.0, 100 - distance / scale)


class MatchEngine:
    """
    Ranks archetypes by Euclidean distance to a normalized profile.

    Distance only covers axes present in both the profile and the archetype's stats;
    archetypes sharing no axis with the profile are left out. Centrist archetypes are
    pushed to the back with an additive penalty unless every profile value sits within
    the veto threshold.
    """

    def __init__(
        self,
        archetypes: Sequence[Archetype],
        veto_threshold: float = VETO_THRESHOLD,
        penalty: float = CENTRIST_PENALTY,
        centrist_markers: Sequence[str] = CENTRIST_MARKERS,
    ):
        self.archetypes = list(archetypes)
        self.veto_threshold = veto_threshold
        self.penalty = penalty
        self.centrist_markers = tuple(marker.lower() for marker in centrist_markers)

    def is_centrist(self, archetype: Archetype) -> bool:
        name = archetype.name.lower()
        return any(marker in name for marker in self.centrist_markers)

    def centrist_eligible(self, profile: Mapping[str, float]) -> bool:
        return all(abs(value) <= self.veto_threshold for value in profile.values())

    @staticmethod
    def distance(profile: Mapping[str, float], stats: Mapping[str, float]) -> Optional[float]:
        """Euclidean distance over shared axes, or None when nothing is shared."""
        squared = 0.0
        shared = 0
        for axis, target in stats.items():
            if axis in profile:
                squared += (profile[axis] - target) ** 2
                shared += 1
        if shared == 0:
            return None
        return math.sqrt(squared)

    def rank(self, profile: Mapping[str, float]) -> List[Match]:
        eligible = self.centrist_eligible(profile)
        matches = []
        for index, archetype in enumerate(self.archetypes):
            raw_distance = self.distance(profile, archetype.stats)
            if raw_distance is None:
                logger.debug(f"Archetype '{archetype.name}' shares no axes with the profile; excluded.")
                continue
            distance = raw_distance
            if not eligible and self.is_centrist(archetype):
                distance += self.penalty
            shared = sum(1 for axis in archetype.stats if axis in profile)
            matches.append(Match(
                archetype=archetype,
                distance=distance,
                raw_distance=raw_distance,
                shared_axes=shared,
                catalog_index=index,
            ))

        # sorted() is stable, so equal distances keep catalog order
        return sorted(matches, key=lambda m: m.distance)

    def best(self, profile: Mapping[str, float]) -> Optional[Match]:
        ranked = self.rank(profile)
        return ranked[0] if ranked else None
