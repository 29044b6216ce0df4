"""
Tests for the settings singleton.
"""

import json

import pytest
import yaml

from fabnet.fabric.baseClient import BaseClient
from fabnet.fabric.config.config import Config


def test_singleton_shares_settings():
    Config().set('discovery-cache-life', 1000)

    assert Config().get('discovery-cache-life') == 1000
    assert Config.instance is not None


def test_defaults():
    assert Config().get('request-timeout') == 30000
    assert Config().get('grpc-wait-for-ready-timeout') == 3000
    assert '1.0' in Config().get('network-config-schema')
    assert Config().get('unknown', 'default') == 'default'


def test_defaults_are_not_shared():
    Config().get('network-config-schema')['9.9'] = 'some.Class'
    Config().get('connection-options')['verify'] = False

    assert '9.9' not in Config().get('network-config-schema')
    assert Config().get('connection-options') == {}


def test_newest_file_wins(tmp_path):
    first = tmp_path / 'first.yaml'
    first.write_text(yaml.safe_dump({'request-timeout': 1000, 'only-first': True}))
    second = tmp_path / 'second.json'
    second.write_text(json.dumps({'request-timeout': 2000}))

    Config().file(str(first))
    Config().file(str(second))

    assert Config().get('request-timeout') == 2000
    assert Config().get('only-first') is True


def test_bottom_file_loses(tmp_path):
    first = tmp_path / 'first.yml'
    first.write_text(yaml.safe_dump({'request-timeout': 1000}))
    fallback = tmp_path / 'fallback.yml'
    fallback.write_text(yaml.safe_dump({'request-timeout': 9000, 'only-fallback': 'x'}))

    Config().file(str(first))
    Config().file(str(fallback), bottom=True)

    assert Config().get('request-timeout') == 1000
    assert Config().get('only-fallback') == 'x'


def test_memory_setting_wins_over_files(tmp_path):
    settings = tmp_path / 'settings.yaml'
    settings.write_text(yaml.safe_dump({'request-timeout': 1000}))

    BaseClient.addConfigFile(str(settings))
    BaseClient.setConfigSetting('request-timeout', 42)

    assert BaseClient.getConfigSetting('request-timeout') == 42


def test_file_path_must_be_string():
    with pytest.raises(ValueError):
        Config().file(None)


def test_file_must_hold_mapping(tmp_path):
    settings = tmp_path / 'settings.yaml'
    settings.write_text('- a\n- b\n')

    with pytest.raises(ValueError):
        Config().file(str(settings))


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        Config().file(str(tmp_path / 'missing.yaml'))
