from typing import Dict, Iterable, Mapping


class ScoreLedger:
    """
    Per-axis score accumulators.

    ``raw`` is the signed sum of every applied effect, ``max_magnitude`` the sum of their
    absolute values. ``max_magnitude`` is a running denominator: it grows with answers and
    shrinks with undos, and is unaffected by cancellation inside ``raw``.

    Only axes from the canonical list given at construction are ever scored; anything else
    in an effect map is ignored.
    """

    def __init__(self, axis_ids: Iterable[str]):
        self.axis_ids = tuple(axis_ids)
        self.raw: Dict[str, float] = {axis: 0 for axis in self.axis_ids}
        self.max_magnitude: Dict[str, float] = {axis: 0 for axis in self.axis_ids}

    def apply(self, effects: Mapping[str, float]) -> None:
        for axis in self.axis_ids:
            if axis in effects:
                effect = effects[axis]
                self.raw[axis] += effect
                self.max_magnitude[axis] += abs(effect)

    def revert(self, effects: Mapping[str, float]) -> None:
        """Exact inverse of apply(). Only call with an effect map that is currently applied."""
        for axis in self.axis_ids:
            if axis in effects:
                effect = effects[axis]
                self.raw[axis] -= effect
                self.max_magnitude[axis] -= abs(effect)

    def normalize(self) -> Dict[str, float]:
        """
        Maps each axis onto -100..100 as ``raw / max_magnitude * 100``.

        An untouched axis (max_magnitude == 0) normalizes to 0. The result stays within
        bounds because apply/revert always move raw and max_magnitude together; it is
        not clamped.
        """
        profile = {}
        for axis in self.axis_ids:
            denominator = self.max_magnitude[axis] or 1
            profile[axis] = (self.raw[axis] / denominator) * 100
        return profile

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        return {
            axis: {"raw": self.raw[axis], "max_magnitude": self.max_magnitude[axis]}
            for axis in self.axis_ids
        }


def sum_effects(effect_maps: Iterable[Mapping[str, float]]) -> Dict[str, float]:
    """Combines several effect maps into one, as a multi-select answer is scored."""
    combined: Dict[str, float] = {}
    for effects in effect_maps:
        for axis, value in effects.items():
            combined[axis] = combined.get(axis, 0) + value
    return combined
