# main.py
"""
Main entry point for the particle effects.

This script orchestrates the whole lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and builds the configured effect on its canvas.
4. Runs the frame loop until the user quits or max_frames is reached.
5. Handles clean shutdown.
"""
import logging
from typing import Dict, Any, Optional
from utils import setup_logging, load_config, ConfigurationError, RandomSource
import cProfile
import pstats
import io

EFFECT_NAMES = ("fireworks", "snow", "snowfall")


def create_effect(name: str, canvas, options: Optional[Dict[str, Any]] = None,
                  rng: Optional[RandomSource] = None):
    """
    Builds the effect called `name` on `canvas`.

    "fireworks" gives a FireworksEngine; "snow" and "snowfall" give a
    SnowField using the preset of the same name.
    """
    from simulation import FireworksEngine
    from snow import SnowField

    if name == "fireworks":
        return FireworksEngine(canvas, options, rng)
    if name in ("snow", "snowfall"):
        return SnowField(canvas, options, rng, preset=name)

    msg = f"Configuration error: unknown effect '{name}'. Expected one of {', '.join(EFFECT_NAMES)}."
    logging.critical(msg)
    raise ConfigurationError(msg)


def main():
    """
    The main function to run the effect.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Effects Starting ---")

    effect_params = config.get('effect', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from visualization import Visualizer

    # --- Component Initialization ---
    # The visualizer opens the window; the effect draws onto its canvas.
    visualizer = Visualizer(vis_params)
    effect = create_effect(
        effect_params.get('name', 'fireworks'),
        visualizer.canvas,
        effect_params.get('options', {}),
    )

    log_throttle = run_params.get('log_throttle_frames', 300)
    max_frames = run_params.get('max_frames', 0)
    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    effect.start()
    running = True
    frame_num = 0

    if profiler:
        profiler.enable()
    while running:
        # The visualizer returns False once the user quits.
        if not visualizer.handle_events(effect):
            break

        effect.frame()
        visualizer.present()
        frame_num += 1

        # Hot loops must throttle logs
        if frame_num % log_throttle == 0:
            counts = ", ".join(f"{key}: {value}" for key, value in effect.stats().items())
            logging.info(f"Frame {frame_num} | {counts}")

        if max_frames and frame_num >= max_frames:
            logging.info(f"Reached max_frames ({max_frames}). Stopping.")
            running = False
    if profiler:
        profiler.disable()

    effect.stop()
    visualizer.close()
    logging.info("Frame loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Effects Shutting Down ---")


if __name__ == "__main__":
    main()
