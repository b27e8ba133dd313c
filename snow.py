# snow.py
"""
Handles the snow-fall effects.

A SnowField keeps a fixed-size pool of flakes in NumPy arrays. Flakes fall
at a constant speed with a small constant sideways drift, return to the top
after leaving the bottom edge and wrap around the left and right edges.
Nothing is ever created or destroyed during the animation; only set_count()
and clear() change the pool size.
"""
import logging
import numpy as np
from typing import Dict, Any, Optional
from numba import jit

from constants import SNOW_COLOR, SNOW_PRESETS
from simulation import Effect
from utils import ConfigurationError, RandomSource

# --- Data Contracts ---
#
# class SnowField(Effect):
#   - __init__(self, canvas, options=None, rng=None, preset="snow"):
#     - Inputs:
#       - preset: A key of SNOW_PRESETS whose values act as the defaults.
#     - Side Effects: Fills the pool with options["count"] flakes.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.radii, self.speeds, self.drifts, self.opacities have shape (N,).
#
#   - set_count(self, count: int) -> None:
#     - Side Effects: Reinitializes every array to `count` flakes.
#
#   - step(self) -> None:
#     - Invariants: Pool size is constant. After a step, every flake's y
#       is at most height, and x lies in [-radius, width + radius].


@jit(nopython=True)
def _advance_flakes_numba(positions, radii, speeds, drifts, respawn_x,
                          width, height, wind, respawn_random_x):
    """
    Numba-jitted function to move every flake by one frame.

    `respawn_x` holds one pre-drawn column per flake so the kernel stays
    free of random state; it is only read for flakes that wrap to the top.
    """
    flake_count = positions.shape[0]
    for i in range(flake_count):
        radius = radii[i]
        positions[i, 0] += drifts[i] + wind
        positions[i, 1] += speeds[i]

        if positions[i, 1] > height:
            positions[i, 1] = -radius
            if respawn_random_x:
                positions[i, 0] = respawn_x[i]

        if positions[i, 0] > width + radius:
            positions[i, 0] = -radius
        elif positions[i, 0] < -radius:
            positions[i, 0] = width + radius


class SnowField(Effect):
    """
    A fixed-size pool of falling flakes, managed via NumPy arrays.
    """
    def __init__(self, canvas, options: Optional[Dict[str, Any]] = None,
                 rng: Optional[RandomSource] = None, preset: str = "snow"):
        if preset not in SNOW_PRESETS:
            msg = (
                f"Configuration error: unknown snow preset '{preset}'. "
                f"Expected one of {', '.join(sorted(SNOW_PRESETS))}."
            )
            logging.critical(msg)
            raise ConfigurationError(msg)
        self.name = preset
        super().__init__(canvas, options, SNOW_PRESETS[preset], rng)

        self.set_count(self.options['count'])

    @property
    def count(self) -> int:
        return self.positions.shape[0]

    def set_count(self, count: int) -> None:
        """
        Replaces the pool with `count` freshly scattered flakes.
        """
        if isinstance(count, bool) or not isinstance(count, (int, np.integer)) or count < 0:
            msg = f"Configuration error: flake count must be a non-negative integer, got {count!r}."
            logging.critical(msg)
            raise ConfigurationError(msg)

        count = int(count)
        opts = self.options
        self.positions = np.column_stack((
            self.rng.random_array(count) * self.width,
            self.rng.random_array(count) * self.height,
        )).astype(np.float64)
        self.radii = self._scatter(opts['radius'], count)
        self.speeds = self._scatter(opts['speed'], count)
        self.drifts = self._scatter(opts['drift'], count)
        self.opacities = self._scatter(opts['opacity'], count)

        logging.info(f"{self.name} pool initialized with {count} flakes.")
        logging.debug(
            f"Flake arrays created. Positions shape: {self.positions.shape}, "
            f"Radii shape: {self.radii.shape}"
        )

    def _scatter(self, bounds: Dict[str, float], count: int) -> np.ndarray:
        low, high = bounds['min'], bounds['max']
        return (low + self.rng.random_array(count) * (high - low)).astype(np.float64)

    def step(self) -> None:
        """
        Executes one frame: move every flake, then draw it.
        """
        self.tick += 1

        self.canvas.clear()
        if not self.has_area or self.count == 0:
            return

        self.canvas.set_blend_mode(additive=False)

        respawn_x = self.rng.random_array(self.count) * self.width
        _advance_flakes_numba(
            self.positions, self.radii, self.speeds, self.drifts, respawn_x,
            float(self.width), float(self.height),
            float(self.options['wind']), bool(self.options['respawn_random_x'])
        )

        for i in range(self.count):
            self.canvas.fill_circle(
                (self.positions[i, 0], self.positions[i, 1]),
                self.radii[i],
                SNOW_COLOR,
                self.opacities[i],
            )

    def clear(self) -> None:
        """Empties the pool and blanks the canvas; set_count() refills it."""
        self.set_count(0)
        self.canvas.clear()
        logging.info(f"{self.name} cleared.")

    def stats(self) -> Dict[str, int]:
        return {"flakes": self.count}
