# utils.py
"""
Utility functions for the collision simulator.

This module provides configuration loading and logging setup. Neither
belongs to the physics or the rendering; both are used by the entry point.
"""
import copy
import logging
import logging.handlers
import json
import os
from typing import Dict, Any

from constants import (
    DEFAULT_WIDTH, DEFAULT_HEIGHT, DEFAULT_PARTICLE_COUNT,
    DEFAULT_PARTICLE_RADIUS, DEFAULT_TICK_INTERVAL_MS, SPEED,
    MIN_RADIUS, MAX_RADIUS, RADIUS_STEP, WINDOW_TITLE,
    BACKGROUND_COLOR, BORDER_COLOR, BORDER_WIDTH
)

# --- Data Contracts ---
#
# load_config(path: str) -> Dict[str, Any]:
#   - Outputs: DEFAULT_CONFIG with the file's sections merged on top.
#     Keys missing from the file keep their default values.
#   - Invariants: FileNotFoundError and json.JSONDecodeError are logged
#     and re-raised.
#
# setup_logging(config: Dict[str, Any]) -> None:
#   - Inputs:
#     - config: A dictionary containing a "logging" key with "level",
#       "format", and "log_file" sub-keys.
#   - Side Effects: Configures the root Python logger. Creates the log
#     directory if it doesn't exist. Sets up a console handler and a
#     rotating file handler.

DEFAULT_CONFIG: Dict[str, Any] = {
    "simulation_parameters": {
        "seed": None,
        "particle_count": DEFAULT_PARTICLE_COUNT,
        "width": DEFAULT_WIDTH,
        "height": DEFAULT_HEIGHT,
        "initial_radius": DEFAULT_PARTICLE_RADIUS,
        "speed": SPEED,
        "tick_interval_ms": DEFAULT_TICK_INTERVAL_MS,
        "min_radius": MIN_RADIUS,
        "max_radius": MAX_RADIUS,
        "radius_step": RADIUS_STEP,
    },
    "run_control": {
        "headless": False,
        "max_steps": 0,
        "log_throttle_steps": 100,
        "profile": False,
    },
    "visualization": {
        "window_title": WINDOW_TITLE,
        "background_color": list(BACKGROUND_COLOR),
        "border_color": list(BORDER_COLOR),
        "border_width": BORDER_WIDTH,
    },
    "logging": {
        "level": "INFO",
        "format": "%(asctime)s - %(levelname)s - %(message)s",
        "log_file": "logs/simulation.log",
    },
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a copy of `base` with `override` merged in, section by section."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file on top of DEFAULT_CONFIG."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            user_config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(user_config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(user_config).__name__}."
        logging.error(msg)
        raise ValueError(msg)

    logging.info("Configuration loaded successfully.")
    return merge_config(DEFAULT_CONFIG, user_config)


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Sets up logging to both the console and a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = log_config.get('level', 'INFO').upper()
    log_format = log_config.get('format', '%(asctime)s - %(levelname)s - %(message)s')
    log_file_path = log_config.get('log_file', 'logs/simulation.log')

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
