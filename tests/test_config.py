from pathlib import Path

import pytest

from provider_images.config import (
    COLOR_PALETTE, KEYWORD_CATEGORIES, FetchSettings, ResolverConfig,
    config_from_dict, load_config,
)
from provider_images.icons import Icon


def _write(tmp_path, text):
    path = tmp_path / 'config.yaml'
    path.write_text(text, encoding='utf-8')
    return str(path)


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(str(tmp_path / 'nope.yaml'))
    assert config == ResolverConfig()
    assert config.fetch.timeout_seconds == 5.0
    assert config.fetch.user_agent == 'Mozilla/5.0 (compatible; KidFunBot/1.0)'


def test_empty_section_gives_defaults():
    assert config_from_dict({}) == ResolverConfig()


def test_fetch_and_worker_overrides(tmp_path):
    path = _write(tmp_path, """
image_resolution:
  fetch:
    timeout_seconds: 2.5
    user_agent: "TestBot/2.0"
  max_workers: 8
  cache_write_workers: 1
  store:
    table: providers
""")
    config = load_config(path)
    assert config.fetch == FetchSettings(timeout_seconds=2.5, user_agent='TestBot/2.0')
    assert config.max_workers == 8
    assert config.cache_write_workers == 1
    assert config.store_table == 'providers'
    assert config.placeholders.keyword_categories == KEYWORD_CATEGORIES


def test_table_overrides_keep_yaml_order(tmp_path):
    path = _write(tmp_path, """
image_resolution:
  placeholder_images:
    chess: [https://img/chess.png]
    default: https://img/default.png
  keyword_categories:
    checkmate: chess
    rook: chess
  icon_keywords:
    chess: star
    board: moon
  fallback_icons: [sun, smile]
  color_palette: [red, blue]
""")
    config = load_config(path)
    assert config.placeholders.images == (
        ('chess', ('https://img/chess.png',)),
        ('default', ('https://img/default.png',)),
    )
    assert config.placeholders.keyword_categories == (('checkmate', 'chess'), ('rook', 'chess'))
    assert config.icons.keyword_icons == (('chess', Icon.STAR), ('board', Icon.MOON))
    assert config.icons.fallback_icons == (Icon.SUN, Icon.SMILE)
    assert config.icons.palette == ('red', 'blue')


def test_unknown_icon_rejected():
    with pytest.raises(ValueError):
        config_from_dict({'fallback_icons': ['unicorn']})


def test_keyword_pointing_at_unknown_category_rejected():
    with pytest.raises(ValueError):
        config_from_dict({'keyword_categories': {'chess': 'chess'}})


def test_placeholder_table_needs_default():
    with pytest.raises(ValueError):
        config_from_dict({
            'placeholder_images': {'chess': ['https://img/chess.png']},
            'keyword_categories': {'rook': 'chess'},
        })


def test_empty_palette_rejected():
    with pytest.raises(ValueError):
        config_from_dict({'color_palette': []})


def test_malformed_yaml_rejected(tmp_path):
    path = _write(tmp_path, 'image_resolution: [unclosed\n')
    with pytest.raises(ValueError):
        load_config(path)


def test_config_is_immutable():
    config = ResolverConfig()
    with pytest.raises(AttributeError):
        config.max_workers = 10
    assert COLOR_PALETTE == config.icons.palette


def test_shipped_config_loads():
    config = load_config(str(Path(__file__).resolve().parent.parent / 'config' / 'config.yaml'))
    assert config.fetch.timeout_seconds == 5.0
    assert config.store_table == 'provider_profiles'
