"""
Tests für Config-Validierung und SimulationConfig
"""
import json

import pytest

from blockfall.config_schema import ConfigValidator, SimulationConfig, validate_config_file


@pytest.fixture
def validator():
    return ConfigValidator()


def write_config(tmp_path, data):
    path = tmp_path / 'config.json'
    path.write_text(json.dumps(data), encoding='utf-8')
    return str(path)


def test_default_config_is_valid(validator):
    is_valid, errors = validator.validate(validator.get_default_config())

    assert is_valid
    assert errors == []


@pytest.mark.parametrize("section, key, value", [
    ('simulation', 'spawn_threshold', 1.0),
    ('simulation', 'spawn_threshold', -0.1),
    ('simulation', 'fall_speed', 0),
    ('grid', 'rows', 0),
    ('render', 'fps', 500),
    ('app', 'console_log_level', 'LOUD'),
])
def test_schema_rejects_out_of_range_values(validator, section, key, value):
    config = validator.get_default_config()
    config[section][key] = value

    is_valid, errors = validator.validate(config)

    assert not is_valid
    assert any(error.startswith(f"{section}.{key}") for error in errors)


def test_palette_entries_must_be_rgb(validator):
    config = validator.get_default_config()
    config['palette'] = [[255, 0]]

    is_valid, errors = validator.validate(config)

    assert not is_valid
    assert errors[0].startswith('palette.0')


def test_group_larger_than_grid_is_rejected(validator):
    config = validator.get_default_config()
    config['grid']['rows'] = 4

    is_valid, errors = validator.validate(config)

    assert not is_valid
    assert any('simulation.group_size' in error for error in errors)


def test_block_threshold_below_one_is_rejected(validator):
    config = validator.get_default_config()
    config['simulation']['block_threshold'] = 0.5

    is_valid, errors = validator.validate(config)

    assert not is_valid
    assert any('simulation.block_threshold' in error for error in errors)


def test_config_file_is_merged_over_defaults(tmp_path):
    path = write_config(tmp_path, {'grid': {'rows': 30}, 'simulation': {'seed': 9}})

    is_valid, errors, config = validate_config_file(path)

    assert is_valid, errors
    assert config['grid'] == {'rows': 30, 'cols': 20, 'cell_size': 30}
    assert config['simulation']['seed'] == 9
    assert config['simulation']['fall_speed'] == 0.05


def test_missing_config_file(tmp_path):
    is_valid, errors, config = validate_config_file(str(tmp_path / 'nope.json'))

    assert not is_valid
    assert 'nicht gefunden' in errors[0]
    assert config == {}


def test_broken_json(tmp_path):
    path = tmp_path / 'config.json'
    path.write_text('{"grid": ', encoding='utf-8')

    is_valid, errors, config = validate_config_file(str(path))

    assert not is_valid
    assert errors[0].startswith('JSON-Parsing Fehler')


def test_simulation_config_from_dict(validator):
    config = validator.get_default_config()
    config['palette'] = [[1, 2, 3], [4, 5, 6]]
    config['simulation']['block_threshold'] = 3

    settings = SimulationConfig.from_dict(config)

    assert settings.rows == 15
    assert settings.cols == 20
    assert settings.group_size == 5
    assert settings.fall_speed == 0.05
    assert settings.spawn_threshold == 0.99
    assert settings.spawn_offset == 4
    assert settings.block_threshold == 3
    assert settings.palette == [(1, 2, 3), (4, 5, 6)]


def test_simulation_config_from_empty_dict_uses_defaults():
    assert SimulationConfig.from_dict({}) == SimulationConfig()
