import pygame
import pytest

from main import create_effect
from simulation import FireworksEngine
from snow import SnowField
from utils import ConfigurationError, RandomSource
from visualization import Canvas


def pixel(surface, x, y):
    return tuple(surface.get_at((x, y)))[:3]


@pytest.fixture
def surface():
    return pygame.Surface((64, 48))


def test_canvas_requires_a_surface():
    with pytest.raises(ConfigurationError):
        Canvas(object())


def test_canvas_reports_surface_size(surface):
    canvas = Canvas(surface)
    assert (canvas.width, canvas.height) == (64, 48)

    canvas.rebind(pygame.Surface((10, 20)))
    assert (canvas.width, canvas.height) == (10, 20)


def test_clear_blanks_surface(surface):
    surface.fill((90, 90, 90))
    Canvas(surface).clear()
    assert pixel(surface, 5, 5) == (0, 0, 0)


def test_normal_fill_replaces_pixels(surface):
    canvas = Canvas(surface)
    canvas.clear()

    canvas.fill_circle((20, 20), 5, (100, 0, 0))
    canvas.fill_circle((20, 20), 5, (0, 80, 0))

    assert pixel(surface, 20, 20) == (0, 80, 0)
    assert pixel(surface, 40, 40) == (0, 0, 0)


def test_additive_fill_accumulates_brightness(surface):
    canvas = Canvas(surface)
    canvas.clear()
    canvas.set_blend_mode(additive=True)

    canvas.fill_circle((20, 20), 5, (100, 0, 0))
    canvas.fill_circle((20, 20), 5, (100, 30, 0))

    assert pixel(surface, 20, 20) == (200, 30, 0)


def test_additive_fill_scales_by_alpha(surface):
    canvas = Canvas(surface)
    canvas.clear()
    canvas.set_blend_mode(additive=True)

    canvas.fill_circle((20, 20), 4, (200, 100, 0), alpha=0.5)

    assert pixel(surface, 20, 20) == (100, 50, 0)


def test_invisible_or_empty_shapes_draw_nothing(surface):
    canvas = Canvas(surface)
    canvas.clear()

    canvas.fill_circle((20, 20), 5, (255, 255, 255), alpha=0.0)
    canvas.fill_circle((20, 20), 0, (255, 255, 255))
    canvas.stroke_polyline([(1, 1)], (255, 255, 255), 2)

    assert pixel(surface, 20, 20) == (0, 0, 0)
    assert pixel(surface, 1, 1) == (0, 0, 0)


@pytest.mark.parametrize("additive", [False, True])
def test_stroke_polyline_draws_along_points(surface, additive):
    canvas = Canvas(surface)
    canvas.clear()
    canvas.set_blend_mode(additive=additive)

    canvas.stroke_polyline([(10, 10), (50, 10)], (0, 0, 200), 1)

    assert pixel(surface, 30, 10) == (0, 0, 200)
    assert pixel(surface, 30, 30) == (0, 0, 0)


def test_shapes_may_leave_the_surface(surface):
    canvas = Canvas(surface)
    canvas.clear()
    canvas.set_blend_mode(additive=True)

    canvas.fill_circle((-30, 500), 3, (255, 255, 255), alpha=0.4)
    canvas.fill_circle((-2, 20), 5, (255, 0, 0))
    canvas.stroke_polyline([(-10, -10), (100, 100)], (0, 255, 0), 2)

    assert pixel(surface, 0, 20) == (255, 0, 0)
    assert pixel(surface, 20, 20) == (0, 255, 0)
    assert pixel(surface, 40, 5) == (0, 0, 0)


def test_scratch_layer_is_reused_and_grown(surface):
    canvas = Canvas(surface)
    canvas.set_blend_mode(additive=True)

    canvas.fill_circle((10, 10), 4, (255, 0, 0))
    first = canvas._layers[False]
    canvas.fill_circle((10, 10), 2, (255, 0, 0))
    assert canvas._layers[False] is first

    canvas.stroke_polyline([(0, 5), (30, 5)], (0, 255, 0), 1)
    assert canvas._layers[False].get_size() == (34, 10)

    canvas.set_blend_mode(additive=False)
    canvas.fill_circle((10, 10), 4, (255, 0, 0), alpha=0.5)
    assert set(canvas._layers) == {False, True}


def test_scratch_layers_stay_bounded_during_long_run():
    canvas = Canvas(pygame.Surface((640, 480)))
    engine = FireworksEngine(canvas, None, RandomSource(seed=1))
    engine.start()

    for _ in range(1500):
        engine.frame()

    assert len(canvas._layers) <= 2


def test_fireworks_render_onto_pygame_surface():
    surface = pygame.Surface((320, 240))
    canvas = Canvas(surface)
    engine = FireworksEngine(canvas, None, RandomSource(seed=21))
    engine.launch(3)

    for _ in range(30):
        engine.step()
    assert len(engine.rockets) + len(engine.particles) > 0
    assert pygame.surfarray.array3d(surface).any()

    for _ in range(120):
        engine.step()
    assert engine.rockets == []
    assert engine.pending_launches == []
    assert all(p.alpha > 0 for p in engine.particles)


def test_snow_renders_onto_pygame_surface():
    surface = pygame.Surface((120, 80))
    canvas = Canvas(surface)
    field = SnowField(canvas, {"count": 30, "opacity": {"min": 1.0, "max": 1.0}},
                      RandomSource(seed=22))

    field.step()

    lit = sum(1 for x in range(120) for y in range(80) if pixel(surface, x, y) != (0, 0, 0))
    assert lit > 0


@pytest.mark.parametrize("name, kind", [
    ("fireworks", FireworksEngine), ("snow", SnowField), ("snowfall", SnowField),
])
def test_create_effect_builds_named_effect(name, kind):
    effect = create_effect(name, Canvas(pygame.Surface((40, 30))), {"seed": 3})
    assert isinstance(effect, kind)
    assert effect.name == name


def test_create_effect_rejects_unknown_name():
    with pytest.raises(ConfigurationError, match="rain"):
        create_effect("rain", Canvas(pygame.Surface((40, 30))))
