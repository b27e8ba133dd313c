# simulation.py
"""
Handles the frame loop of the animation effects.

This module defines the Effect base class, which owns the lifecycle shared
by every effect (drawing sink, surface size, options, random source, the
running flag and the frame counter), and the FireworksEngine, which advances
rockets and sparks one frame at a time and schedules new launches against
the frame counter instead of wall-clock timers.
"""
import logging
from typing import Dict, Any, List, Optional

from constants import CANVAS_INTERFACE, FIREWORKS_DEFAULTS, LAUNCH_ZONES, TARGET_REGION
from particle import Rocket, Spark
from utils import ConfigurationError, RandomSource, merge_options, validate_ranges

# --- Data Contracts ---
#
# class Effect:
#   - __init__(self, canvas, options: Optional[Dict[str, Any]], defaults: Dict[str, Any],
#              rng: Optional[RandomSource] = None):
#     - Inputs:
#       - canvas: A drawing sink exposing CANVAS_INTERFACE.
#       - options: Caller overrides, deep-merged over `defaults`.
#       - rng: Random source; built from options["seed"] when omitted.
#     - Side Effects: Raises ConfigurationError for a missing/invalid canvas
#       or an inverted {"min", "max"} range.
#
#   - start() / stop() -> None: Idempotent.
#   - frame() -> bool: One step() if running. Returns whether it stepped.
#   - step() -> None: Advances exactly one frame and renders it.
#   - clear() -> None: Discards every entity and blanks the canvas.
#   - resize(width, height) -> None: Only affects entities created afterwards.
#
# class FireworksEngine(Effect):
#   - launch(count: int = 1) -> None: Queues `count` rockets, staggered by
#     options["launch_stagger"] frames.
#   - Invariants: A detonated rocket is removed in the same frame it
#     detonates. A spark with alpha <= 0 is removed in the frame its alpha
#     reaches zero. Removal iterates in reverse index order.


class Effect:
    """
    Lifecycle shared by the particle effects.
    """
    name = "effect"

    def __init__(self, canvas, options: Optional[Dict[str, Any]], defaults: Dict[str, Any],
                 rng: Optional[RandomSource] = None):
        self._validate_canvas(canvas)
        self.canvas = canvas

        self.options = merge_options(defaults, options)
        validate_ranges(self.options)

        self.rng = rng if rng is not None else RandomSource(self.options.get('seed'))

        self.width = 0
        self.height = 0
        self.resize(canvas.width, canvas.height)

        self.running = False
        self.tick = 0

    def _validate_canvas(self, canvas) -> None:
        if canvas is None:
            msg = f"Configuration error: {self.name} requires a drawing surface, got None."
            logging.critical(msg)
            raise ConfigurationError(msg)
        missing = [attr for attr in CANVAS_INTERFACE if not hasattr(canvas, attr)]
        if missing:
            msg = (
                f"Configuration error: {type(canvas).__name__} cannot be used as a "
                f"drawing surface, it lacks {', '.join(missing)}."
            )
            logging.critical(msg)
            raise ConfigurationError(msg)

    @property
    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0

    def resize(self, width: int, height: int) -> None:
        """Updates the bounds used for entities created from now on."""
        self.width = max(int(width), 0)
        self.height = max(int(height), 0)
        if not self.has_area:
            logging.warning(f"{self.name} surface has zero area ({self.width}x{self.height}); rendering paused.")
        else:
            logging.info(f"{self.name} surface sized to {self.width}x{self.height}.")

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self._on_start()
        logging.info(f"{self.name} started at frame {self.tick}.")

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self._on_stop()
        logging.info(f"{self.name} stopped at frame {self.tick}.")

    def frame(self) -> bool:
        """
        The per-refresh callback for a host loop.

        Returns:
            bool: True if a frame was advanced, False while stopped.
        """
        if not self.running:
            return False
        self.step()
        return True

    def _on_start(self) -> None:
        pass

    def _on_stop(self) -> None:
        pass

    def step(self) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def stats(self) -> Dict[str, int]:
        """Entity counts for throttled status logging."""
        return {}


class FireworksEngine(Effect):
    """
    Launches rockets, detonates them into sparks and fades the sparks out.
    """
    name = "fireworks"

    def __init__(self, canvas, options: Optional[Dict[str, Any]] = None,
                 rng: Optional[RandomSource] = None):
        super().__init__(canvas, options, FIREWORKS_DEFAULTS, rng)
        self._validate_kinematics()
        self.rockets: List[Rocket] = []
        self.particles: List[Spark] = []
        self.pending_launches: List[int] = []
        self.next_launch_tick: Optional[int] = None

        logging.info(
            f"FireworksEngine initialized: {self.options['particles']} base sparks, "
            f"launch delay {self.options['delay']['min']}-{self.options['delay']['max']} frames."
        )

    def _validate_kinematics(self) -> None:
        """
        Rockets must speed up to reach their detonation distance, and sparks
        must slow down to settle.
        """
        acceleration = self.options['acceleration']
        friction = self.options['friction']
        msg = None
        if acceleration <= 1:
            msg = f"Configuration error: acceleration must be greater than 1, got {acceleration}."
        elif not 0 < friction < 1:
            msg = f"Configuration error: friction must lie strictly between 0 and 1, got {friction}."
        if msg:
            logging.critical(msg)
            raise ConfigurationError(msg)

    def _on_start(self) -> None:
        self._schedule_next_launch()

    def _on_stop(self) -> None:
        self.next_launch_tick = None

    def _schedule_next_launch(self) -> None:
        delay = max(1, round(self.rng.between(self.options['delay'])))
        self.next_launch_tick = self.tick + delay
        logging.debug(f"Next automatic launch scheduled for frame {self.next_launch_tick}.")

    def launch(self, count: int = 1) -> None:
        """Queues `count` rockets; each one after the first waits launch_stagger frames more."""
        stagger = self.options['launch_stagger']
        for i in range(count):
            self.pending_launches.append(self.tick + i * stagger)

    def create_rocket(self) -> Optional[Rocket]:
        """
        Creates one rocket from a random bottom-edge zone towards the upper
        middle of the surface.
        """
        if not self.has_area:
            logging.debug("Skipped rocket creation on a zero-area surface.")
            return None

        zone_start, zone_end = LAUNCH_ZONES[int(self.rng.random() * len(LAUNCH_ZONES))]
        sx = self.width * zone_start + self.rng.random() * self.width * (zone_end - zone_start)
        sy = float(self.height)

        (tx_min, tx_span), (ty_min, ty_span) = TARGET_REGION
        tx = self.width * tx_min + self.rng.random() * self.width * tx_span
        ty = self.height * ty_min + self.rng.random() * self.height * ty_span

        rocket = Rocket.launch((sx, sy), (tx, ty), self.rng, self.options)
        self.rockets.append(rocket)
        return rocket

    def _run_schedule(self) -> None:
        if self.next_launch_tick is not None and self.tick >= self.next_launch_tick:
            count = 2 if self.rng.random() > 1 - self.options['double_launch_chance'] else 1
            self.launch(count)
            self._schedule_next_launch()

        due = [t for t in self.pending_launches if t <= self.tick]
        if due:
            self.pending_launches = [t for t in self.pending_launches if t > self.tick]
            for _ in due:
                self.create_rocket()

    def step(self) -> None:
        """
        Executes one frame: spawn, then update-and-draw rockets and sparks.
        """
        self.tick += 1

        self.canvas.clear()
        # Queued launches wait for a positive area instead of being dropped.
        if not self.has_area:
            return

        self._run_schedule()

        self.canvas.set_blend_mode(additive=True)

        # Reverse order keeps indices valid while removing mid-loop.
        for i in range(len(self.rockets) - 1, -1, -1):
            rocket = self.rockets[i]
            sparks = rocket.update(self.options, self.rng)
            if rocket.detonated:
                self.particles.extend(sparks)
                del self.rockets[i]
            else:
                rocket.draw(self.canvas, self.options, self.rng)

        for i in range(len(self.particles) - 1, -1, -1):
            spark = self.particles[i]
            spark.update(self.options)
            if spark.visible:
                spark.draw(self.canvas)
            else:
                del self.particles[i]

    def clear(self) -> None:
        """Discards all rockets, sparks and queued launches and blanks the canvas."""
        self.rockets = []
        self.particles = []
        self.pending_launches = []
        self.canvas.clear()
        logging.info("Fireworks cleared.")

    def stats(self) -> Dict[str, int]:
        return {"rockets": len(self.rockets), "particles": len(self.particles)}
