import json
import logging
import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

from style_service.config import (
    DEFAULT_ELEMENT_SELECTOR,
    DEFAULT_STYLE_EXPECTATIONS,
    DEFAULT_TARGET_URL,
    DEFAULT_TIMEOUT_MS,
    ConfigurationLoadError,
    ValidationSettings,
    load_style_expectations,
    parse_target_urls,
    read_style_expectations,
)

GUIDES_DIR = os.path.join(os.path.dirname(__file__), '..', '..', 'style_guides')


class TestLoadStyleExpectations:

    def test_default_table_without_environment(self, caplog):
        with caplog.at_level(logging.INFO, logger='style_service.config'):
            table = load_style_expectations({})
        assert table == DEFAULT_STYLE_EXPECTATIONS
        assert 'default' in table
        assert "Using default hardcoded style expectations." in caplog.text

    def test_default_table_is_a_copy(self):
        table = load_style_expectations({})
        table['h1']['fontSize'].append('1px')
        assert '1px' not in DEFAULT_STYLE_EXPECTATIONS['h1']['fontSize']

    def test_inline_json_wins(self, tmp_path):
        path = tmp_path / 'guide.json'
        path.write_text(json.dumps({'p': {'fontSize': ['16px']}}))
        table = load_style_expectations({
            'STYLE_EXPECTATIONS_JSON': json.dumps({'H1': {'fontSize': ['55px']}}),
            'STYLE_EXPECTATIONS_PATH': str(path),
        })
        assert table == {'h1': {'fontSize': ['55px']}}

    def test_file_path(self, tmp_path):
        path = tmp_path / 'guide.json'
        path.write_text(json.dumps({'p': {'fontSize': ['16px']}}))
        assert load_style_expectations({'STYLE_EXPECTATIONS_PATH': str(path)}) == {
            'p': {'fontSize': ['16px']}
        }

    def test_malformed_json_falls_back_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger='style_service.config'):
            table = load_style_expectations({'STYLE_EXPECTATIONS_JSON': '{"h1": '})
        assert table == DEFAULT_STYLE_EXPECTATIONS
        assert 'Using default expectations.' in caplog.text

    def test_non_object_json_falls_back(self):
        assert load_style_expectations({'STYLE_EXPECTATIONS_JSON': '["h1"]'}) == DEFAULT_STYLE_EXPECTATIONS

    def test_missing_file_falls_back(self, tmp_path, caplog):
        missing = tmp_path / 'nope.json'
        with caplog.at_level(logging.WARNING, logger='style_service.config'):
            table = load_style_expectations({'STYLE_EXPECTATIONS_PATH': str(missing)})
        assert table == DEFAULT_STYLE_EXPECTATIONS
        assert 'not found' in caplog.text

    def test_unreadable_file_falls_back(self, tmp_path):
        # a directory exists but can't be opened as a file
        assert load_style_expectations({'STYLE_EXPECTATIONS_PATH': str(tmp_path)}) == DEFAULT_STYLE_EXPECTATIONS

    def test_read_raises_configuration_error(self, tmp_path):
        path = tmp_path / 'broken.json'
        path.write_text('not json')
        with pytest.raises(ConfigurationLoadError):
            read_style_expectations(str(path))

    @pytest.mark.parametrize('name', ['omaspride.json', 'randys_worldwide_extended.json'])
    def test_bundled_style_guides_load(self, name):
        table = read_style_expectations(os.path.join(GUIDES_DIR, name))
        assert 'default' in table


class TestValidationSettings:

    def test_defaults(self):
        settings = ValidationSettings.from_env({})
        assert settings.target_urls == [DEFAULT_TARGET_URL]
        assert settings.element_selector == DEFAULT_ELEMENT_SELECTOR
        assert settings.timeout_ms == DEFAULT_TIMEOUT_MS
        assert settings.login_password is None
        assert settings.login_button_text == 'Login using password'
        assert settings.password_input_name == 'password'

    def test_target_urls_preferred_over_target_url(self):
        settings = ValidationSettings.from_env({
            'TARGET_URLS': 'https://a.example/, ,https://b.example/ ',
            'TARGET_URL': 'https://c.example/',
        })
        assert settings.target_urls == ['https://a.example/', 'https://b.example/']

    def test_single_target_url(self):
        settings = ValidationSettings.from_env({'TARGET_URL': 'https://c.example/'})
        assert settings.target_urls == ['https://c.example/']

    def test_overrides(self):
        settings = ValidationSettings.from_env({
            'ELEMENT_SELECTOR': 'h1, p',
            'TEST_TIMEOUT_MS': '30000',
            'LOGIN_PASSWORD': 'secret',
            'TEXT_TO_VERIFY': 'Hello',
        })
        assert settings.element_selector == 'h1, p'
        assert settings.timeout_ms == 30000
        assert settings.login_password == 'secret'
        assert settings.text_to_verify == 'Hello'

    def test_invalid_timeout_uses_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger='style_service.config'):
            settings = ValidationSettings.from_env({'TEST_TIMEOUT_MS': 'soon'})
        assert settings.timeout_ms == DEFAULT_TIMEOUT_MS
        assert 'TEST_TIMEOUT_MS' in caplog.text


def test_parse_target_urls_drops_blanks():
    assert parse_target_urls(' , ') == []
