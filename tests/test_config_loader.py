import json
import os

import pytest

from config.config_loader import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH, load_config, save_config, validate_config


def test_defaults():
    config = load_config()
    assert config == DEFAULT_CONFIG
    assert config["threshold_inf_loop"] == 100
    assert config is not DEFAULT_CONFIG


def test_file_overrides_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"threshold_inf_loop": 7, "log_runs": True}))
    config = load_config(str(path))
    assert config["threshold_inf_loop"] == 7
    assert config["log_runs"] is True
    assert config["max_steps"] == DEFAULT_CONFIG["max_steps"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_missing_key():
    config = DEFAULT_CONFIG.copy()
    del config["max_steps"]
    with pytest.raises(ValueError, match="max_steps"):
        validate_config(config)


@pytest.mark.parametrize("value", ["100", 1.5, True])
def test_wrong_threshold_type(value):
    config = dict(DEFAULT_CONFIG, threshold_inf_loop=value)
    with pytest.raises(TypeError):
        validate_config(config)


def test_threshold_must_be_positive():
    with pytest.raises(ValueError, match="must be positive"):
        validate_config(dict(DEFAULT_CONFIG, threshold_inf_loop=0))


def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = dict(DEFAULT_CONFIG, max_steps=500)
    save_config(config, str(path))
    assert load_config(str(path)) == config


def test_shipped_config_is_the_default_source():
    assert os.path.basename(DEFAULT_CONFIG_PATH) == "runtime_config.json"
    assert os.path.exists(DEFAULT_CONFIG_PATH)
    assert load_config(DEFAULT_CONFIG_PATH) == DEFAULT_CONFIG


def test_none_keeps_builtin_defaults():
    assert load_config(None) == DEFAULT_CONFIG
