# utils.py
"""
Utility functions for the animation framework.

This module provides helpers that are used across different parts of the
application but do not belong to a specific effect: logging setup, config
loading, option merging and validation, the shared random source and
colour conversion.
"""
import copy
import logging
import logging.handlers
import json
import os
from typing import Dict, Any, Optional, Sequence, Tuple

import numpy as np
import pygame

# --- Data Contracts ---
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Side Effects: Configures the root Python logger. Creates a log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.
#
# merge_options(defaults, overrides) -> Dict[str, Any]:
#   - Outputs: A new dictionary; nested dictionaries are merged key by key,
#     every other value in `overrides` replaces the default outright.
#   - Invariants: Neither input is mutated.
#
# class RandomSource:
#   - random() -> float in [0, 1)
#   - uniform(low, high) -> float in [low, high)
#   - random_array(size) -> np.ndarray of floats in [0, 1)
#   - Invariants: Every random draw in an effect goes through one instance,
#     so substituting it makes trajectories reproducible.


class ConfigurationError(ValueError):
    """Raised when an effect is constructed or reconfigured with invalid input."""


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/effects.log')

    # Ensure the log directory exists
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Clear existing handlers to avoid duplication
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(log_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Rotates when the log reaches 1MB, keeps 5 backup logs.
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path, maxBytes=1024*1024, backupCount=5
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
        logging.info("Configuration loaded successfully.")
        return config
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise


def merge_options(defaults: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Deep-merges caller options over a set of defaults.

    Keys the defaults do not know about are kept but logged, since they are
    usually typos in config.json.
    """
    merged = copy.deepcopy(defaults)
    for key, value in (overrides or {}).items():
        if key not in defaults:
            logging.warning(f"Unknown option '{key}' is not used by this effect.")
            merged[key] = copy.deepcopy(value)
        elif isinstance(defaults[key], dict) and isinstance(value, dict):
            merged[key] = merge_options(defaults[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def validate_ranges(options: Dict[str, Any], path: str = "") -> None:
    """
    Walks an option tree and rejects every {"min", "max"} pair with min > max.
    """
    for key, value in options.items():
        if not isinstance(value, dict):
            continue
        name = f"{path}{key}"
        if "min" in value and "max" in value:
            if value["min"] > value["max"]:
                msg = (
                    f"Configuration error: option '{name}' has min {value['min']} "
                    f"greater than max {value['max']}."
                )
                logging.critical(msg)
                raise ConfigurationError(msg)
        else:
            validate_ranges(value, path=f"{name}.")


class RandomSource:
    """
    The single source of randomness for an effect, backed by a NumPy Generator.
    """
    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self.rng.random())

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def between(self, bounds: Dict[str, float]) -> float:
        """Draws from a {"min", "max"} option range."""
        return self.uniform(bounds["min"], bounds["max"])

    def random_array(self, size: int) -> np.ndarray:
        return self.rng.random(size)


def hsl_color(hue: float, saturation: float, lightness: float) -> Tuple[int, int, int]:
    """
    Converts a CSS-style HSL colour (hue in degrees, the rest in percent) to RGB.

    Hues outside [0, 360) wrap around, which is what jittered spark hues need.
    """
    color = pygame.Color(0, 0, 0)
    color.hsla = (
        hue % 360,
        min(max(saturation, 0), 100),
        min(max(lightness, 0), 100),
        100,
    )
    return (color.r, color.g, color.b)


def scale_color(color: Sequence[int], factor: float) -> Tuple[int, int, int]:
    """Premultiplies an RGB colour by an alpha factor in [0, 1]."""
    factor = min(max(factor, 0.0), 1.0)
    return (int(color[0] * factor), int(color[1] * factor), int(color[2] * factor))
