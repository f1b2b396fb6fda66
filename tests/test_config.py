"""
Tests for Configuration
=======================
Tests for phrasekit/settings.py and phrasekit/config.py.
"""

import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from phrasekit.config import GeneratorConfig, get_config, load_env, parse_bool
from phrasekit.errors import InvalidArgumentError
from phrasekit.settings import get_setting, load_app_config, resolve_path

ENV_KEYS = [
    "PHRASEKIT_BITS",
    "PHRASEKIT_SEPARATORS",
    "PHRASEKIT_ENCODING",
    "PHRASEKIT_ALWAYS_USE_SEPARATORS",
    "PHRASEKIT_DISABLE_SEPARATORS",
    "PHRASEKIT_DISABLE_WORD_MODIFIER",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # keep a stray ./.env out of the tests
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Tests for app.yaml loading."""

    def test_app_config_loads(self):
        data = load_app_config()
        assert "generator" in data
        assert "sampler" in data

    def test_dotted_path(self):
        assert get_setting("generator.bits") == 50.0
        assert get_setting("sampler.power_of_two") == 67108864

    def test_missing_path_returns_default(self):
        assert get_setting("generator.nope", "fallback") == "fallback"
        assert get_setting("generator.bits.deeper") is None

    def test_resolve_relative_path(self, tmp_path):
        assert resolve_path("words.txt") == (tmp_path / "words.txt").resolve()

    def test_resolve_absolute_path(self, tmp_path):
        path = tmp_path / "words.txt"
        assert resolve_path(str(path)) == path

    def test_resolve_requires_value(self):
        with pytest.raises(ValueError):
            resolve_path(None)


class TestGeneratorConfig:
    """Tests for GeneratorConfig defaults."""

    def test_defaults_from_app_yaml(self):
        config = GeneratorConfig()
        assert config.bits == 50.0
        assert config.separators == '-_!$&*+=23456789'
        assert config.encoding == 'utf-8'
        assert config.always_use_separators is False
        assert config.disable_separators is False
        assert config.disable_word_modifier is False
        assert config.wordlists == {'default': 'english.txt'}
        assert config.max_pool_size == 1048576
        assert config.power_of_two == 67108864
        assert config.probability_pool_size == 2
        assert config.word_count_multiplier == 2

    def test_explicit_values_kept(self):
        config = GeneratorConfig(bits=64, separators='-', disable_separators=True)
        assert config.bits == 64.0
        assert config.separators == '-'
        assert config.disable_separators is True

    def test_wordlist_paths_resolved(self, tmp_path):
        config = GeneratorConfig(wordlists={'local': './words.txt', 'bundled': 'spanish.txt'})
        assert config.wordlists['local'] == str((tmp_path / 'words.txt').resolve())
        assert config.wordlists['bundled'] == 'spanish.txt'


class TestGetConfig:
    """Tests for environment and override layering."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("PHRASEKIT_BITS", "64")
        monkeypatch.setenv("PHRASEKIT_SEPARATORS", "-+")
        monkeypatch.setenv("PHRASEKIT_DISABLE_SEPARATORS", "yes")
        monkeypatch.setenv("PHRASEKIT_DISABLE_WORD_MODIFIER", "0")
        config = get_config()
        assert config.bits == 64.0
        assert config.separators == '-+'
        assert config.disable_separators is True
        assert config.disable_word_modifier is False

    def test_explicit_overrides_win(self, monkeypatch):
        monkeypatch.setenv("PHRASEKIT_BITS", "64")
        config = get_config(bits=80.0)
        assert config.bits == 80.0

    def test_none_overrides_ignored(self, monkeypatch):
        monkeypatch.setenv("PHRASEKIT_ENCODING", "latin-1")
        config = get_config(encoding=None)
        assert config.encoding == 'latin-1'

    def test_env_file(self, tmp_path):
        env_path = tmp_path / "custom.env"
        env_path.write_text(
            "# comment\n"
            "PHRASEKIT_BITS=72\n"
            "PHRASEKIT_ALWAYS_USE_SEPARATORS=true\n"
            "OTHER_KEY=ignored\n"
        )
        config = get_config(env_path=env_path)
        assert config.bits == 72.0
        assert config.always_use_separators is True

    def test_default_env_file_in_cwd(self, tmp_path):
        (tmp_path / ".env").write_text("PHRASEKIT_BITS=40\n")
        assert get_config().bits == 40.0

    def test_process_env_beats_env_file(self, tmp_path, monkeypatch):
        env_path = tmp_path / "custom.env"
        env_path.write_text("PHRASEKIT_BITS=72\n")
        monkeypatch.setenv("PHRASEKIT_BITS", "90")
        assert get_config(env_path=env_path).bits == 90.0

    def test_load_env_filters_prefix(self, tmp_path):
        env_path = tmp_path / "custom.env"
        env_path.write_text("PHRASEKIT_BITS=72\nANTHROPIC=nope\n")
        assert load_env(env_path) == {"PHRASEKIT_BITS": "72"}

    def test_invalid_bits_in_env(self, monkeypatch):
        monkeypatch.setenv("PHRASEKIT_BITS", "lots")
        with pytest.raises(InvalidArgumentError):
            get_config()

    def test_invalid_bool_in_env(self, monkeypatch):
        monkeypatch.setenv("PHRASEKIT_DISABLE_SEPARATORS", "maybe")
        with pytest.raises(InvalidArgumentError):
            get_config()


class TestParseBool:
    """Tests for environment flag parsing."""

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on", " On "])
    def test_true(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "false", "no", "off", ""])
    def test_false(self, value):
        assert parse_bool(value) is False
