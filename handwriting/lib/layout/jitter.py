import random
from typing import Optional
from .models import RenderUnit, StyleParameters, StyledUnit, Transform, UnitKind


FULL_TURN = 360
OFFSET_RANGE = 20


class JitterGenerator:
    """Draws a fresh random transform for every unit.

    Pass a seeded ``random.Random`` to get repeatable transforms; by default
    each generator owns an unseeded one.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def _centered(self) -> float:
        return self.rng.random() - 0.5

    def margins(self, unit: RenderUnit, params: StyleParameters) -> tuple[float, float]:
        if unit.kind == UnitKind.SYMBOL:
            left = params.char_spacing * (1 + params.symbol_spacing_adjustment) * 2
            right = params.char_spacing * 0.1
            return left, right
        return params.char_spacing, params.char_spacing

    def transform(self, unit: RenderUnit, params: StyleParameters) -> Transform:
        scale_factor = 1 + self._centered() * params.size_variation
        rotation = self._centered() * params.rotation_offset * FULL_TURN
        dy = self._centered() * params.vertical_offset * OFFSET_RANGE
        dx = self._centered() * params.horizontal_offset * OFFSET_RANGE
        margin_left, margin_right = self.margins(unit, params)
        return Transform(
            scale_factor=scale_factor,
            rotation=rotation,
            dx=dx,
            dy=dy,
            margin_left=margin_left,
            margin_right=margin_right,
        )

    def style(self, unit: RenderUnit, params: StyleParameters) -> StyledUnit:
        return StyledUnit(unit=unit, transform=self.transform(unit, params))
