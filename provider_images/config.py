"""
config.py — Tables and settings for provider image resolution.

Every lookup table the pipeline matches against lives here as an immutable
value and is handed to the components through ResolverConfig, so a
deployment can swap tables in config/config.yaml without touching code.

YAML layout (all keys optional, section 'image_resolution'):

    image_resolution:
      fetch:
        timeout_seconds: 5.0
        user_agent: "Mozilla/5.0 (compatible; KidFunBot/1.0)"
        max_redirects: 5
        max_body_bytes: 524288
      max_workers: 4
      cache_write_workers: 2
      store:
        table: provider_profiles
      placeholder_images:   {category: [url, ...], ..., default: [url, ...]}
      keyword_categories:   {keyword: category, ...}
      icon_keywords:        {keyword: icon-name, ...}
      fallback_icons:       [icon-name, ...]
      color_palette:        [css-class, ...]

Mapping order in the YAML file is the matching order.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import yaml

from provider_images.icons import Icon

log = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'config/config.yaml'
CONFIG_SECTION = 'image_resolution'

DEFAULT_USER_AGENT = 'Mozilla/5.0 (compatible; KidFunBot/1.0)'
DEFAULT_CATEGORY = 'default'


# ------------------------------------------------------------------ #
# Placeholder tables
# ------------------------------------------------------------------ #

_UNSPLASH = 'https://images.unsplash.com/photo-{}?w=400'

PLACEHOLDER_IMAGES = (
    # Sports & athletics
    ('soccer', (
        _UNSPLASH.format('1575361204480-aadea25e6e68'),
        _UNSPLASH.format('1579952363873-27f3bade9f55'),
        _UNSPLASH.format('1489944440615-453fc2b6a9a9'),
    )),
    ('basketball', (
        _UNSPLASH.format('1546519638-68e109498ffc'),
        _UNSPLASH.format('1519861531473-9200262188bf'),
    )),
    ('swimming', (
        _UNSPLASH.format('1519315901367-f34ff9154487'),
        _UNSPLASH.format('1530549387789-4c1017266635'),
    )),
    ('tennis',     (_UNSPLASH.format('1554068865-24cecd4e34b8'),)),
    ('baseball',   (_UNSPLASH.format('1566577739112-5180d4bf9390'),)),
    ('volleyball', (_UNSPLASH.format('1612872087720-bb876e2e67d1'),)),
    ('gymnastics', (_UNSPLASH.format('1518611012118-696072aa579a'),)),
    ('martial_arts', (
        _UNSPLASH.format('1555597673-b21d5c935865'),
        _UNSPLASH.format('1583473848882-f9a5bc7fd2ee'),
    )),
    ('dance', (
        _UNSPLASH.format('1508700115892-45ecd05ae2ad'),
        _UNSPLASH.format('1518834107812-67b0b7c58434'),
    )),
    ('yoga', (_UNSPLASH.format('1544367567-0f2fcb009e0b'),)),

    # Arts & creative
    ('art', (
        _UNSPLASH.format('1513364776144-60967b0f800f'),
        _UNSPLASH.format('1561070791-2526d30994b5'),
        _UNSPLASH.format('1456086272160-b28b0645b729'),
    )),
    ('painting', (
        _UNSPLASH.format('1460661419201-fd4cecdf8a8b'),
        _UNSPLASH.format('1596548438137-d51ea5c83ca5'),
        _UNSPLASH.format('1579541814924-49fef17c5be5'),
    )),
    ('pottery', (
        _UNSPLASH.format('1578749556568-bc2c40e68b61'),
        _UNSPLASH.format('1583225214464-9296029427aa'),
    )),
    ('ceramics', (_UNSPLASH.format('1578749556568-bc2c40e68b61'),)),
    ('music', (
        _UNSPLASH.format('1511379938547-c1f69419868d'),
        _UNSPLASH.format('1507838153414-b4b713384a76'),
    )),
    ('theater', (_UNSPLASH.format('1503095396549-807759245b35'),)),
    ('drama',   (_UNSPLASH.format('1503095396549-807759245b35'),)),
    ('crafts', (
        _UNSPLASH.format('1452860606245-08befc0ff44b'),
        _UNSPLASH.format('1502086223501-7ea6ecd79368'),
        _UNSPLASH.format('1513519245088-0e12902e5a38'),
    )),

    # STEM
    ('science', (
        _UNSPLASH.format('1532094349884-543bc11b234d'),
        _UNSPLASH.format('1564325724739-bae0bd08762c'),
    )),
    ('coding',   (_UNSPLASH.format('1515879218367-8466d910aaa4'),)),
    ('robotics', (_UNSPLASH.format('1485827404703-89b55fcc595e'),)),
    ('math',     (_UNSPLASH.format('1509228468518-180dd4864904'),)),

    # Outdoor
    ('camping', (_UNSPLASH.format('1504280390367-361c6d9f38f4'),)),
    ('hiking',  (_UNSPLASH.format('1551632811-561732d1e306'),)),
    ('nature',  (_UNSPLASH.format('1441974231531-c6227db76b6e'),)),
    ('outdoor', (_UNSPLASH.format('1501594907352-04cda38ebc29'),)),

    (DEFAULT_CATEGORY, (
        _UNSPLASH.format('1503454537195-1dcabb73ffb9'),
        _UNSPLASH.format('1488521787991-ed7bbaae773c'),
        _UNSPLASH.format('1503676260728-1c00da094a0b'),
    )),
)

# Order matters: 'martial arts' must be seen before the bare 'art' category
KEYWORD_CATEGORIES = (
    ('martial arts', 'martial_arts'),
    ('martial art', 'martial_arts'),
    ('karate', 'martial_arts'),
    ('taekwondo', 'martial_arts'),
    ('judo', 'martial_arts'),
    ('jiu-jitsu', 'martial_arts'),
    ('jiujitsu', 'martial_arts'),
    ('kung fu', 'martial_arts'),
    ('kickboxing', 'martial_arts'),
    ('boxing', 'martial_arts'),
    ('mma', 'martial_arts'),
    ('self defense', 'martial_arts'),
    ('self-defense', 'martial_arts'),

    ('football', 'soccer'),
    ('futbol', 'soccer'),
    ('hoops', 'basketball'),
    ('swim', 'swimming'),
    ('pool', 'swimming'),
    ('ballet', 'dance'),
    ('hip hop', 'dance'),
    ('hip-hop', 'dance'),
    ('contemporary', 'dance'),

    ('arts and crafts', 'crafts'),
    ('arts & crafts', 'crafts'),
    ('drawing', 'art'),
    ('painting', 'painting'),
    ('sculpture', 'art'),
    ('clay', 'pottery'),
    ('piano', 'music'),
    ('guitar', 'music'),
    ('violin', 'music'),
    ('singing', 'music'),
    ('acting', 'theater'),

    ('programming', 'coding'),
    ('computer', 'coding'),
    ('engineering', 'robotics'),
    ('stem', 'science'),

    ('camp', 'camping'),
    ('trail', 'hiking'),
    ('adventure', 'outdoor'),
)


# ------------------------------------------------------------------ #
# Icon tables
# ------------------------------------------------------------------ #

ICON_KEYWORDS = (
    ('art', Icon.PALETTE),
    ('arts', Icon.PALETTE),
    ('craft', Icon.PALETTE),
    ('creative', Icon.PALETTE),
    ('design', Icon.PALETTE),
    ('painting', Icon.PALETTE),

    ('code', Icon.CODE),
    ('coding', Icon.CODE),
    ('tech', Icon.CODE),
    ('technology', Icon.CODE),
    ('computer', Icon.CODE),
    ('programming', Icon.CODE),
    ('stem', Icon.ROCKET),
    ('science', Icon.ROCKET),

    ('sport', Icon.DUMBBELL),
    ('sports', Icon.DUMBBELL),
    ('soccer', Icon.TARGET),
    ('football', Icon.TARGET),
    ('basketball', Icon.TROPHY),
    ('athletic', Icon.DUMBBELL),
    ('fitness', Icon.DUMBBELL),

    ('music', Icon.MUSIC),
    ('dance', Icon.MUSIC),
    ('singing', Icon.MUSIC),
    ('instrument', Icon.MUSIC),

    ('photography', Icon.CAMERA),
    ('photo', Icon.CAMERA),

    ('nature', Icon.TREE_PINE),
    ('outdoor', Icon.TREE_PINE),
    ('hiking', Icon.COMPASS),
    ('camping', Icon.TREE_PINE),
    ('forest', Icon.TREE_PINE),

    ('swimming', Icon.WAVES),
    ('water', Icon.WAVES),
    ('pool', Icon.WAVES),

    ('reading', Icon.BOOK_OPEN),
    ('book', Icon.BOOK_OPEN),
    ('literacy', Icon.BOOK_OPEN),

    ('adventure', Icon.COMPASS),
    ('exploration', Icon.COMPASS),
    ('quest', Icon.COMPASS),
)

FALLBACK_ICONS = (
    Icon.HEART, Icon.STAR, Icon.SPARKLES, Icon.FLOWER,
    Icon.SUN, Icon.MOON, Icon.SMILE,
)

COLOR_PALETTE = (
    'bg-blue-100 text-blue-600',
    'bg-green-100 text-green-600',
    'bg-purple-100 text-purple-600',
    'bg-pink-100 text-pink-600',
    'bg-orange-100 text-orange-600',
    'bg-cyan-100 text-cyan-600',
    'bg-indigo-100 text-indigo-600',
    'bg-rose-100 text-rose-600',
    'bg-emerald-100 text-emerald-600',
    'bg-amber-100 text-amber-600',
)


# ------------------------------------------------------------------ #
# Config objects
# ------------------------------------------------------------------ #

@dataclass(frozen=True)
class FetchSettings:
    timeout_seconds: float = 5.0
    user_agent:      str = DEFAULT_USER_AGENT
    max_redirects:   int = 5
    max_body_bytes:  int = 512 * 1024


@dataclass(frozen=True)
class PlaceholderTables:
    images:             tuple = PLACEHOLDER_IMAGES
    keyword_categories: tuple = KEYWORD_CATEGORIES
    default_category:   str = DEFAULT_CATEGORY


@dataclass(frozen=True)
class IconTables:
    keyword_icons:  tuple = ICON_KEYWORDS
    fallback_icons: tuple = FALLBACK_ICONS
    palette:        tuple = COLOR_PALETTE


@dataclass(frozen=True)
class ResolverConfig:
    fetch:               FetchSettings = field(default_factory=FetchSettings)
    placeholders:        PlaceholderTables = field(default_factory=PlaceholderTables)
    icons:               IconTables = field(default_factory=IconTables)
    max_workers:         int = 4
    cache_write_workers: int = 2
    store_table:         str = 'provider_profiles'


# ------------------------------------------------------------------ #
# YAML loading
# ------------------------------------------------------------------ #

def _mapping(section: dict, key: str) -> Optional[dict]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, dict) or not value:
        raise ValueError(f'❌ {CONFIG_SECTION}.{key} must be a non-empty mapping')
    return value


def _sequence(section: dict, key: str) -> Optional[list]:
    value = section.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not value:
        raise ValueError(f'❌ {CONFIG_SECTION}.{key} must be a non-empty list')
    return value


def _icon(name) -> Icon:
    try:
        return Icon(str(name).strip().lower())
    except ValueError:
        raise ValueError(f'❌ Unknown icon {name!r} in {CONFIG_SECTION}')


def config_from_dict(section: dict) -> ResolverConfig:
    """Build a ResolverConfig from the 'image_resolution' mapping."""
    config = ResolverConfig()
    if not section:
        return config
    if not isinstance(section, dict):
        raise ValueError(f'❌ {CONFIG_SECTION} must be a mapping')

    fetch = section.get('fetch') or {}
    if fetch:
        config = replace(config, fetch=FetchSettings(
            timeout_seconds=float(fetch.get('timeout_seconds', FetchSettings.timeout_seconds)),
            user_agent=str(fetch.get('user_agent', DEFAULT_USER_AGENT)),
            max_redirects=int(fetch.get('max_redirects', FetchSettings.max_redirects)),
            max_body_bytes=int(fetch.get('max_body_bytes', FetchSettings.max_body_bytes)),
        ))

    placeholders = config.placeholders
    images = _mapping(section, 'placeholder_images')
    if images is not None:
        table = tuple(
            (str(cat).strip().lower(), tuple(urls if isinstance(urls, list) else [urls]))
            for cat, urls in images.items()
        )
        if DEFAULT_CATEGORY not in dict(table):
            raise ValueError(f'❌ {CONFIG_SECTION}.placeholder_images needs a "{DEFAULT_CATEGORY}" entry')
        placeholders = replace(placeholders, images=table)
    keywords = _mapping(section, 'keyword_categories')
    if keywords is not None:
        placeholders = replace(placeholders, keyword_categories=tuple(
            (str(k).lower(), str(v).strip().lower()) for k, v in keywords.items()
        ))
    known = dict(placeholders.images)
    unknown = [cat for _, cat in placeholders.keyword_categories if cat not in known]
    if unknown:
        raise ValueError(f'❌ keyword_categories point at unknown categories: {sorted(set(unknown))}')

    icons = config.icons
    icon_keywords = _mapping(section, 'icon_keywords')
    if icon_keywords is not None:
        icons = replace(icons, keyword_icons=tuple(
            (str(k).lower(), _icon(v)) for k, v in icon_keywords.items()
        ))
    fallback = _sequence(section, 'fallback_icons')
    if fallback is not None:
        icons = replace(icons, fallback_icons=tuple(_icon(v) for v in fallback))
    palette = _sequence(section, 'color_palette')
    if palette is not None:
        icons = replace(icons, palette=tuple(str(v) for v in palette))

    store = section.get('store') or {}
    return replace(
        config,
        placeholders=placeholders,
        icons=icons,
        max_workers=int(section.get('max_workers', config.max_workers)),
        cache_write_workers=int(section.get('cache_write_workers', config.cache_write_workers)),
        store_table=str(store.get('table', config.store_table)),
    )


def load_config(path: str = DEFAULT_CONFIG_PATH) -> ResolverConfig:
    """
    Load ResolverConfig from a YAML file.

    A missing file yields the built-in defaults; a malformed one raises
    ValueError so a bad deployment fails at startup, not per request.
    """
    config_path = Path(path)
    if not config_path.exists():
        log.info(f'No config at {config_path} — using built-in tables')
        return ResolverConfig()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            full_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f'❌ Could not parse {config_path}: {e}')

    if not isinstance(full_config, dict):
        raise ValueError(f'❌ {config_path} must contain a mapping at the top level')

    log.debug(f'Loaded config from {config_path}')
    return config_from_dict(full_config.get(CONFIG_SECTION) or {})
