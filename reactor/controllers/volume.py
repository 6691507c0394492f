"""
Volume Controller - Session volume state.

The level lives here, not on the resource: it is applied to whichever
resource is live when it changes, and re-applied after every load so the
next track inherits it.
"""
import logging

from ..config import DEFAULT_VOLUME, VOLUME_STEP
from ..utils import clamp

logger = logging.getLogger(__name__)


class VolumeController:
    """Clamped volume level applied to the live audio resource."""

    def __init__(self, level: float = DEFAULT_VOLUME, step: float = VOLUME_STEP):
        self.level = clamp(level, 0.0, 1.0)
        self.step_size = step

    def set(self, value: float, resource=None) -> float:
        """Clamp and store value, applying it to resource if given."""
        level = clamp(float(value), 0.0, 1.0)
        if level != value:
            logger.debug(f'Volume {value} clamped to {level}')
        self.level = level
        if resource is not None:
            self.apply(resource)
        logger.info(f'Volume: {round(self.level * 100)}%')
        return self.level

    def step(self, direction: int, resource=None) -> float:
        """Nudge the level up (direction > 0) or down by one step."""
        delta = self.step_size if direction > 0 else -self.step_size
        # Round away float drift so repeated steps land on exact bounds
        return self.set(round(self.level + delta, 4), resource)

    def apply(self, resource):
        """Push the current level to a resource."""
        resource.volume = self.level
