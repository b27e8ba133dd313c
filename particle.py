# particle.py
"""
Defines the entities of the fireworks effect.

A Rocket climbs from a launch point on the bottom edge towards a target and
detonates near it; a detonation produces a burst of Sparks, which spread out,
fall under gravity and fade until they are invisible. Neither entity holds a
reference to the engine: options, the random source and the drawing sink are
passed into each call.
"""
import logging
import math
from collections import deque
from typing import Dict, Any, List, Tuple

from constants import (
    GRAVITY_SCALE, HUE_JITTER, ROCKET_TIP_LIGHTNESS, ROCKET_TIP_RADIUS,
    SPARK_LIGHTNESS
)
from utils import RandomSource, hsl_color

# --- Data Contracts ---
#
# class Rocket:
#   - launch(origin, target, rng, options) -> Rocket
#     - Draws speed, wobble, hue and brightness from `rng`.
#   - update(options, rng) -> List[Spark]:
#     - Outputs: The sparks of the detonation if this update detonated the
#       rocket, an empty list otherwise.
#     - Invariants: distance_traveled is non-decreasing while ascending.
#       Once `detonated` is True, update() and draw() change nothing.
#
# class Spark:
#   - burst(x, y, hue, rng, options) -> List[Spark]
#     - Outputs: particles + floor(random * particles_bonus) sparks.
#   - update(options) -> None:
#     - Invariants: alpha is non-increasing; alpha == 1 - age * decay.

Point = Tuple[float, float]


class Spark:
    """
    A short-lived decaying point produced by a rocket detonation.
    """
    def __init__(self, x: float, y: float, vx: float, vy: float, hue: float,
                 decay: float, size: float):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.hue = hue
        self.decay = decay
        self.size = size
        self.age = 0
        self.alpha = 1.0

    @classmethod
    def burst(cls, x: float, y: float, hue: float, rng: RandomSource,
              options: Dict[str, Any]) -> List["Spark"]:
        """
        Creates the sparks of one detonation, scattered in every direction.
        """
        count = options['particles'] + int(rng.random() * options['particles_bonus'])
        sparks = []
        for _ in range(count):
            spark_hue = hue + (rng.random() * 2 * HUE_JITTER - HUE_JITTER)
            angle = rng.random() * math.pi * 2
            speed = rng.random() * options['explosion'] + 1
            sparks.append(cls(
                x, y,
                math.cos(angle) * speed,
                math.sin(angle) * speed,
                spark_hue,
                rng.between(options['decay']),
                rng.between(options['line_width']['explosion']),
            ))
        return sparks

    @property
    def visible(self) -> bool:
        return self.alpha > 0

    def update(self, options: Dict[str, Any]) -> None:
        """Advances the spark by one frame."""
        friction = options['friction']
        self.vx *= friction
        self.vy *= friction
        self.vy += options['gravity'] * GRAVITY_SCALE

        self.x += self.vx
        self.y += self.vy

        # Derived from age rather than accumulated, so N frames of decay d
        # land exactly on 1 - N * d.
        self.age += 1
        self.alpha = 1.0 - self.age * self.decay

    def draw(self, canvas) -> None:
        if not self.visible:
            return
        color = hsl_color(self.hue, 100, SPARK_LIGHTNESS)
        canvas.fill_circle((self.x, self.y), self.size, color, self.alpha)

    def __repr__(self):
        return f"Spark(pos=({self.x:.2f}, {self.y:.2f}), hue={self.hue:.1f}, alpha={self.alpha:.3f})"


class Rocket:
    """
    An emitter that climbs from its origin towards a target and detonates
    once it has covered most of the straight-line distance.
    """
    def __init__(self, origin: Point, target: Point, speed: float, hue: float,
                 brightness: float = 60.0, wobble: float = 0.0,
                 wobble_speed: float = 0.0, wobble_phase: float = 0.0,
                 trail_length: int = 10):
        self.sx, self.sy = origin
        self.tx, self.ty = target
        self.x, self.y = origin

        angle = math.atan2(self.ty - self.sy, self.tx - self.sx)
        self.vx = math.cos(angle) * speed
        self.vy = math.sin(angle) * speed

        self.wobble = wobble
        self.wobble_speed = wobble_speed
        self.wobble_phase = wobble_phase

        self.trail = deque(maxlen=trail_length)
        self.hue = hue
        self.brightness = brightness
        self.target_distance = math.hypot(self.tx - self.sx, self.ty - self.sy)
        self.distance_traveled = 0.0
        self.detonated = False

    @classmethod
    def launch(cls, origin: Point, target: Point, rng: RandomSource,
               options: Dict[str, Any]) -> "Rocket":
        """Creates a rocket with randomised speed, wobble and colour."""
        return cls(
            origin, target,
            speed=rng.between(options['rocket_speed']),
            wobble=(rng.random() - 0.5) * 2 * options['wobble'],
            wobble_speed=rng.between(options['wobble_speed']),
            wobble_phase=rng.random() * math.pi * 2,
            hue=rng.random() * 360,
            brightness=rng.between(options['brightness']),
            trail_length=options['trail_length'],
        )

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    def update(self, options: Dict[str, Any], rng: RandomSource) -> List[Spark]:
        """
        Advances the rocket by one frame.

        Returns:
            List[Spark]: The detonation burst if this frame detonated the
            rocket, otherwise an empty list.
        """
        if self.detonated:
            return []

        self.trail.append((self.x, self.y))

        phase = self.distance_traveled * self.wobble_speed + self.wobble_phase
        wobble_x = math.sin(phase) * self.wobble
        wobble_y = math.cos(phase) * self.wobble

        acceleration = options['acceleration']
        self.vx *= acceleration
        self.vy *= acceleration

        self.x += self.vx + wobble_x
        self.y += self.vy + wobble_y

        self.distance_traveled = math.hypot(self.x - self.sx, self.y - self.sy)

        if self.distance_traveled >= self.target_distance * options['detonation_ratio']:
            return self.detonate(options, rng)
        return []

    def detonate(self, options: Dict[str, Any], rng: RandomSource) -> List[Spark]:
        """Marks the rocket as spent and returns its burst of sparks."""
        self.detonated = True
        sparks = Spark.burst(self.x, self.y, self.hue, rng, options)
        logging.debug(
            f"Rocket detonated at ({self.x:.1f}, {self.y:.1f}) "
            f"with {len(sparks)} sparks, hue {self.hue:.0f}."
        )
        return sparks

    def draw(self, canvas, options: Dict[str, Any], rng: RandomSource) -> None:
        """Strokes the trail and draws the bright tip at the head."""
        if self.detonated:
            return

        start = self.trail[0] if self.trail else self.position
        points = [start] + list(self.trail)
        canvas.stroke_polyline(
            points,
            hsl_color(self.hue, 100, self.brightness),
            rng.between(options['line_width']['trace']),
        )
        canvas.fill_circle(
            self.position,
            ROCKET_TIP_RADIUS,
            hsl_color(self.hue, 100, ROCKET_TIP_LIGHTNESS),
        )

    def __repr__(self):
        return (
            f"Rocket(pos=({self.x:.2f}, {self.y:.2f}), "
            f"target=({self.tx:.2f}, {self.ty:.2f}), detonated={self.detonated})"
        )
