# test_utils.py
import json
import logging
import os

import pytest

from utils import DEFAULT_CONFIG, load_config, merge_config, setup_logging


def test_merge_config_overrides_per_key():
    merged = merge_config(DEFAULT_CONFIG, {"simulation_parameters": {"particle_count": 10}})
    assert merged["simulation_parameters"]["particle_count"] == 10
    assert merged["simulation_parameters"]["width"] == 1200
    assert merged["run_control"] == DEFAULT_CONFIG["run_control"]
    # The defaults themselves are untouched.
    assert DEFAULT_CONFIG["simulation_parameters"]["particle_count"] == 1500


def test_load_config_fills_missing_keys(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "simulation_parameters": {"seed": 3, "initial_radius": 10},
        "run_control": {"headless": True},
    }))

    config = load_config(str(path))

    assert config["simulation_parameters"]["seed"] == 3
    assert config["simulation_parameters"]["initial_radius"] == 10
    assert config["simulation_parameters"]["tick_interval_ms"] == 50
    assert config["run_control"]["headless"] is True
    assert config["run_control"]["log_throttle_steps"] == 100
    assert config["logging"]["level"] == "INFO"


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.json"))


def test_load_config_bad_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_load_config_rejects_non_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_shipped_config_loads():
    config = load_config(os.path.join(os.path.dirname(__file__), os.pardir, "config.json"))
    params = config["simulation_parameters"]
    assert params["particle_count"] == 1500
    assert (params["width"], params["height"]) == (1200, 850)
    assert (params["min_radius"], params["max_radius"]) == (5, 50)


def test_setup_logging_creates_handlers(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "sim.log"
    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 2
    logging.info("hello from the test")
    for handler in root.handlers:
        handler.flush()
    assert "hello from the test" in log_file.read_text()
