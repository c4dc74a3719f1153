import pytest

from provider_images.config import PLACEHOLDER_IMAGES, PlaceholderTables
from provider_images.icons import string_hash
from provider_images.placeholder import PlaceholderCategorizer

IMAGES = dict(PLACEHOLDER_IMAGES)


@pytest.fixture
def categorizer():
    return PlaceholderCategorizer()


@pytest.mark.parametrize('text, category', [
    ('Lakeside Soccer Academy soccer', 'soccer'),
    ('Karate Kids Art Center', 'martial_arts'),
    ('Little Picassos painting classes', 'painting'),
    ('Arts and Crafts Corner', 'crafts'),
    ('Junior football league', 'soccer'),
    ('Aqua Tots pool lessons', 'swimming'),
    ('Bright Minds STEM lab', 'science'),
    ('Kids Martial Arts dojo', 'martial_arts'),
    ('Rainbow Art Studio art craft', 'art'),
])
def test_match_category(categorizer, text, category):
    assert categorizer.match_category(text) == category


def test_synonyms_take_precedence_over_category_names(categorizer):
    # 'swim' is a synonym; 'soccer' is only a category name
    assert categorizer.match_category('soccer and swim club') == 'swimming'


def test_earliest_declared_synonym_wins(categorizer):
    # 'swim' is declared before 'camp'
    assert categorizer.match_category('summer swim camp') == 'swimming'
    assert categorizer.match_category('summer camp swim') == 'swimming'


def test_unmatched_text_uses_default(categorizer):
    assert categorizer.match_category('Happy Kids Club') == 'default'
    assert categorizer.categorize('Happy Kids Club') == IMAGES['default'][0]


def test_empty_text_uses_default(categorizer):
    assert categorizer.categorize('') == IMAGES['default'][0]
    assert categorizer.categorize(None) == IMAGES['default'][0]


def test_variant_key_picks_image_deterministically(categorizer):
    key = 'lakeside soccer academy_soccer'
    url = categorizer.categorize('lakeside soccer academy soccer', key)
    assert url == IMAGES['soccer'][string_hash(key) % len(IMAGES['soccer'])]
    assert url == categorizer.categorize('lakeside soccer academy soccer', key)


def test_single_image_category_ignores_variant(categorizer):
    assert categorizer.categorize('tennis', 'anything') == IMAGES['tennis'][0]


def test_custom_tables():
    tables = PlaceholderTables(
        images=(('chess', ('https://img/chess.png',)), ('default', ('https://img/d.png',))),
        keyword_categories=(('checkmate', 'chess'),),
    )
    categorizer = PlaceholderCategorizer(tables)
    assert categorizer.categorize('Checkmate Academy') == 'https://img/chess.png'
    assert categorizer.categorize('Chess club') == 'https://img/chess.png'
    assert categorizer.categorize('Soccer') == 'https://img/d.png'


def test_tables_without_default_images_are_rejected():
    with pytest.raises(ValueError):
        PlaceholderCategorizer(PlaceholderTables(images=(('chess', ('x',)),), keyword_categories=()))
