# visualization.py
"""
Handles drawing and the display window using Pygame.

Canvas adapts a pygame Surface to the small set of primitives the effects
draw with (clear, blend mode, polyline stroke, alpha-filled circle).
Visualizer owns the window, turns Pygame events into effect operations and
paces the frame loop.
"""
import logging
import math
import pygame
from typing import Dict, Any, Optional, Sequence, Tuple

from constants import BACKGROUND_COLOR, FPS, FULLSCREEN, WINDOW_CAPTION, WINDOW_HEIGHT, WINDOW_WIDTH
from utils import ConfigurationError, scale_color

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Effect


# --- Data Contracts ---
#
# class Canvas:
#   - __init__(self, surface: pygame.Surface):
#     - Side Effects: Raises ConfigurationError if `surface` is not a Surface.
#
#   - set_blend_mode(self, additive: bool) -> None:
#     - Additive mode adds premultiplied colour onto the surface
#       (BLEND_RGB_ADD), so overlapping draws accumulate brightness.
#       Normal mode alpha-blends over what is already there.
#
#   - stroke_polyline(points, color, width) / fill_circle(center, radius, color, alpha):
#     - Inputs: Float coordinates; colours are RGB tuples.
#     - Side Effects: Draw onto the wrapped surface. Nothing is drawn for
#       alpha <= 0, radius <= 0 or fewer than two points.
#
# class Visualizer:
#   - handle_events(self, effect: "Effect") -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Resizes the canvas and the effect, launches, clears
#       and pauses the effect in response to Pygame events.


class Canvas:
    """
    Drawing sink backed by a pygame Surface.
    """
    def __init__(self, surface: pygame.Surface):
        self.additive = False
        # One scratch surface per blend mode, grown to the largest request seen.
        self._layers: Dict[bool, pygame.Surface] = {}
        self.rebind(surface)

    def rebind(self, surface: pygame.Surface) -> None:
        """Points the canvas at a new surface, e.g. after the window was resized."""
        if not isinstance(surface, pygame.Surface):
            msg = f"Configuration error: Canvas needs a pygame.Surface, got {type(surface).__name__}."
            logging.critical(msg)
            raise ConfigurationError(msg)
        self.surface = surface

    @property
    def width(self) -> int:
        return self.surface.get_width()

    @property
    def height(self) -> int:
        return self.surface.get_height()

    def clear(self) -> None:
        self.surface.fill(BACKGROUND_COLOR)

    def set_blend_mode(self, additive: bool) -> None:
        self.additive = additive

    def _layer(self, width: int, height: int, with_alpha: bool) -> pygame.Surface:
        """Returns a blank width x height region of the reusable scratch surface."""
        layer = self._layers.get(with_alpha)
        if layer is None or layer.get_width() < width or layer.get_height() < height:
            grown = (width, height)
            if layer is not None:
                grown = (max(width, layer.get_width()), max(height, layer.get_height()))
            flags = pygame.SRCALPHA if with_alpha else 0
            layer = pygame.Surface(grown, flags)
            self._layers[with_alpha] = layer
        region = layer.subsurface((0, 0, width, height))
        region.fill((0, 0, 0, 0))
        return region

    def stroke_polyline(self, points: Sequence[Tuple[float, float]], color: Tuple[int, int, int],
                        width: float) -> None:
        if len(points) < 2:
            return
        line_width = max(1, int(round(width)))

        if not self.additive:
            pygame.draw.lines(self.surface, color, False, points, line_width)
            return

        # Draw into a black layer around the bounding box, then add it on.
        pad = line_width + 1
        left = int(math.floor(min(p[0] for p in points))) - pad
        top = int(math.floor(min(p[1] for p in points))) - pad
        right = int(math.ceil(max(p[0] for p in points))) + pad
        bottom = int(math.ceil(max(p[1] for p in points))) + pad

        layer = self._layer(right - left, bottom - top, with_alpha=False)
        local_points = [(p[0] - left, p[1] - top) for p in points]
        pygame.draw.lines(layer, color, False, local_points, line_width)
        self.surface.blit(layer, (left, top), special_flags=pygame.BLEND_RGB_ADD)

    def fill_circle(self, center: Tuple[float, float], radius: float, color: Tuple[int, int, int],
                    alpha: float = 1.0) -> None:
        if alpha <= 0 or radius <= 0:
            return
        alpha = min(alpha, 1.0)

        size = int(math.ceil(radius * 2)) + 2
        offset = (int(round(center[0] - size / 2)), int(round(center[1] - size / 2)))
        local_center = (size / 2, size / 2)

        if self.additive:
            layer = self._layer(size, size, with_alpha=False)
            pygame.draw.circle(layer, scale_color(color, alpha), local_center, radius)
            self.surface.blit(layer, offset, special_flags=pygame.BLEND_RGB_ADD)
        else:
            layer = self._layer(size, size, with_alpha=True)
            rgba = (color[0], color[1], color[2], int(alpha * 255))
            pygame.draw.circle(layer, rgba, local_center, radius)
            self.surface.blit(layer, offset)


class Visualizer:
    """
    Opens the display window and drives an effect from Pygame events.
    """
    def __init__(self, vis_params: Optional[Dict[str, Any]] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        pygame.init()

        self.fps = vis_params.get('fps', FPS)
        self.autoresize = vis_params.get('autoresize', True)

        if vis_params.get('fullscreen', FULLSCREEN):
            display_info = pygame.display.Info()
            width, height = display_info.current_w, display_info.current_h
            screen = pygame.display.set_mode((width, height), pygame.FULLSCREEN)
        else:
            width = vis_params.get('width', WINDOW_WIDTH)
            height = vis_params.get('height', WINDOW_HEIGHT)
            flags = pygame.RESIZABLE if self.autoresize else 0
            screen = pygame.display.set_mode((width, height), flags)

        pygame.display.set_caption(vis_params.get('caption', WINDOW_CAPTION))
        self.clock = pygame.time.Clock()
        self.canvas = Canvas(screen)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def handle_events(self, effect: "Effect") -> bool:
        """
        Processes pending Pygame events.

        Returns:
            bool: False if the application should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.VIDEORESIZE:
                self.canvas.rebind(pygame.display.get_surface())
                if effect.options.get('autoresize', True):
                    effect.resize(self.canvas.width, self.canvas.height)

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                elif event.key == pygame.K_SPACE and hasattr(effect, 'launch'):
                    effect.launch(1)
                elif event.key == pygame.K_c:
                    effect.clear()
                elif event.key == pygame.K_p:
                    if effect.running:
                        effect.stop()
                    else:
                        effect.start()
        return True

    def present(self) -> None:
        """Shows the finished frame and waits for the next refresh slot."""
        pygame.display.flip()
        self.clock.tick(self.fps)

    def close(self):
        """Shuts down Pygame."""
        pygame.quit()
