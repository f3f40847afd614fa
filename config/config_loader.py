import json
import logging
import os

log = logging.getLogger(__name__)

# Shipped next to this module, read by the CLI unless --config is given
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "runtime_config.json")

DEFAULT_CONFIG = {
    "threshold_inf_loop": 100,
    "max_steps": 1_000_000,
    "tape_window": 15,
    "log_runs": False,
    "output_directory": "logs/",
    "log_file_prefix": "turing_",
}

# Expected types for validation
CONFIG_SCHEMA = {
    "threshold_inf_loop": int,
    "max_steps": int,
    "tape_window": int,
    "log_runs": bool,
    "output_directory": str,
    "log_file_prefix": str,
}

def validate_config(config):
    for key, expected_type in CONFIG_SCHEMA.items():
        if key not in config:
            raise ValueError(f"Missing required configuration key: {key}")
        # bool is an int subclass, don't let True pass as a threshold
        if not isinstance(config[key], expected_type) or (expected_type is int and isinstance(config[key], bool)):
            raise TypeError(f"Config key '{key}' expected {expected_type}, got {type(config[key])}.")

    for key in ("threshold_inf_loop", "max_steps"):
        if config[key] < 1:
            raise ValueError(f"Config key '{key}' must be positive, got {config[key]}.")

def load_config(path=DEFAULT_CONFIG_PATH):
    """Defaults merged with the JSON file at `path`. `None` keeps the built-in defaults."""
    config = DEFAULT_CONFIG.copy()

    if path is not None:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found at: {path}")

        with open(path, "r", encoding="utf-8") as f:
            user_config = json.load(f)

        # Merge defaults with overrides
        config.update(user_config)

    validate_config(config)

    log.debug("Loaded config:")
    for key, value in config.items():
        log.debug("  %s: %s", key, value)

    return config

def save_config(config, path):
    validate_config(config)
    dirname = os.path.dirname(path)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=4)
