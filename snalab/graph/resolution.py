"""Step/clamp rules for the Louvain resolution parameter."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_RESOLUTION = 1.0
RESOLUTION_STEP = 0.2
MIN_RESOLUTION = 0.0
MAX_RESOLUTION = 3.0

TOO_MANY_NOTICE = "Too many communities; resolution reset to 1.0."
TOO_FEW_NOTICE = "The number of communities cannot be reduced any further."


@dataclass(frozen=True)
class ResolutionChange:
    """Outcome of one step: the new value, an optional user notice, and whether to repartition."""

    value: float
    notice: Optional[str] = None
    repartition: bool = True


def _settle(value: float) -> float:
    # 0.2 steps accumulate float error (2.8 + 0.2 != 3.0).
    return round(value, 6)


class ResolutionControl:
    """Current resolution plus the increase/decrease rules."""

    def __init__(self, value: float = DEFAULT_RESOLUTION, step: float = RESOLUTION_STEP):
        self.value = _settle(value)
        self.step = step

    def increase(self) -> ResolutionChange:
        candidate = _settle(self.value + self.step)
        if candidate > MAX_RESOLUTION:
            self.value = DEFAULT_RESOLUTION
            return ResolutionChange(self.value, notice=TOO_MANY_NOTICE)
        self.value = candidate
        return ResolutionChange(self.value)

    def decrease(self) -> ResolutionChange:
        candidate = _settle(self.value - self.step)
        if candidate < MIN_RESOLUTION:
            self.value = MIN_RESOLUTION
            return ResolutionChange(self.value, notice=TOO_FEW_NOTICE, repartition=False)
        self.value = candidate
        return ResolutionChange(self.value)

    def reset(self) -> None:
        self.value = DEFAULT_RESOLUTION
