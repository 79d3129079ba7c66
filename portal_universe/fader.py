"""Screen fader service.

An explicitly constructed service that owns the full-screen fade overlay's
opacity. Presentation code reads :attr:`ScreenFader.alpha` each frame; the
reload sequence drives it through :meth:`ScreenFader.fade_step`.

The fader must be initialized before use and torn down with the application;
it is never created implicitly.
"""

import logging
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

Color = Tuple[float, float, float]

# Shortest fade duration accepted, so a zero duration completes in one update.
MIN_FADE_DURATION = 0.0001


class ScreenFader:
    """Full-screen fade overlay.

    Attributes:
        color: RGB color of the overlay.
        alpha: Current opacity, 0 (transparent) to 1 (opaque).
    """

    def __init__(self, color: Color = (0.0, 0.0, 0.0)) -> None:
        self.color = color
        self.alpha = 0.0
        self._initialized = False
        self._fade_start: Optional[float] = None
        self._fade_elapsed = 0.0

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Start fully transparent."""
        self.alpha = 0.0
        self._fade_start = None
        self._fade_elapsed = 0.0
        self._initialized = True
        logger.debug("Screen fader initialized")

    def teardown(self) -> None:
        self._initialized = False
        self._fade_start = None
        logger.debug("Screen fader torn down")

    def fade_step(self, target: float, duration: float, unscaled_dt: float) -> bool:
        """Advance a linear fade toward ``target`` by one update.

        The first call of a fade captures the starting opacity. Elapsed time
        uses the unscaled frame delta so fades are unaffected by time scaling.

        Returns:
            bool: True once the fade has completed (``alpha == target``).

        Raises:
            RuntimeError: If the fader has not been initialized.
        """
        if not self._initialized:
            raise RuntimeError("ScreenFader used before initialize()")
        if self._fade_start is None:
            self._fade_start = self.alpha
            self._fade_elapsed = 0.0
        duration = max(MIN_FADE_DURATION, duration)
        self._fade_elapsed += unscaled_dt
        if self._fade_elapsed >= duration:
            self.alpha = target
            self._fade_start = None
            return True
        progress = self._fade_elapsed / duration
        self.alpha = self._fade_start + (target - self._fade_start) * progress
        return False
