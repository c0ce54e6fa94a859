"""
Tests für den CLI-Einstiegspunkt
"""
import json
import logging

import pytest

from blockfall import main as blockfall_main
from blockfall.logger import get_console_log_level
from blockfall.main import build_parser, load_config, main


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_load_config_without_file_uses_defaults():
    config = load_config()

    assert config['grid']['rows'] == 15
    assert config['simulation']['spawn_threshold'] == 0.99


def test_load_config_reads_config_json_in_cwd(isolated_cwd):
    (isolated_cwd / 'config.json').write_text(json.dumps({'grid': {'cols': 8}}), encoding='utf-8')

    config = load_config()

    assert config['grid']['cols'] == 8


def test_invalid_config_falls_back_to_defaults(isolated_cwd):
    path = isolated_cwd / 'broken.json'
    path.write_text(json.dumps({'simulation': {'spawn_threshold': 2}}), encoding='utf-8')

    config = load_config(str(path))

    assert config['simulation']['spawn_threshold'] == 0.99


def test_parser_options():
    args = build_parser().parse_args(['--seed', '4', '--frames', '10', '--headless', '--record', 'out.avi'])

    assert args.seed == 4
    assert args.frames == 10
    assert args.headless
    assert args.record == 'out.avi'
    assert args.config is None


def test_headless_run_with_frame_limit(monkeypatch):
    drivers = []
    original_from_config = blockfall_main.SimulationDriver.from_config

    def capture(*args, **kwargs):
        driver = original_from_config(*args, **kwargs)
        drivers.append(driver)
        return driver

    monkeypatch.setattr(blockfall_main.SimulationDriver, 'from_config', capture)

    exit_code = main(['--headless', '--frames', '20', '--fps', '240', '--seed', '1', '--log-level', 'ERROR'])

    assert exit_code == 0
    assert drivers[0].frame_number == 20
    assert not drivers[0].is_running


@pytest.mark.parametrize('fps', ['0', '-5', '500'])
def test_invalid_fps_override_is_rejected(fps, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(['--headless', '--frames', '3', '--fps', fps])

    assert excinfo.value.code == 2
    assert 'render.fps' in capsys.readouterr().err


def test_negative_frame_limit_is_rejected():
    with pytest.raises(SystemExit) as excinfo:
        main(['--headless', '--frames', '-1'])

    assert excinfo.value.code == 2


def test_log_level_option_sets_console_level():
    main(['--headless', '--frames', '1', '--log-level', 'ERROR'])

    assert get_console_log_level() == logging.ERROR
