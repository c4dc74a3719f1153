"""
placeholder.py — Pick a curated stock image from free text.

Two passes over the lower-cased search text, both first-hit-wins in table
order:
  1. synonym keywords   ('karate' → martial_arts, 'pool' → swimming, ...)
  2. category names     ('soccer', 'martial arts', ...)
Nothing matched → the default category. Never returns None.

When a category has several images, the variant key (provider name + first
specialty) picks one by hash, so the same provider always gets the same
picture.
"""

import logging

from provider_images.config import PlaceholderTables
from provider_images.icons import string_hash

log = logging.getLogger(__name__)


class PlaceholderCategorizer:

    def __init__(self, tables: PlaceholderTables = None):
        tables = tables or PlaceholderTables()
        self.images = dict(tables.images)
        self.keyword_categories = tuple(tables.keyword_categories)
        self.default_category = tables.default_category
        if not self.images.get(self.default_category):
            raise ValueError(f'Placeholder table has no images for {self.default_category!r}')

        # Category names as they appear in prose: martial_arts → "martial arts"
        self._category_phrases = tuple(
            (category.replace('_', ' '), category)
            for category in self.images
            if category != self.default_category
        )

    def match_category(self, search_text: str) -> str:
        """Return the category search_text falls into (default if none)."""
        text = (search_text or '').lower()

        for keyword, category in self.keyword_categories:
            if keyword in text:
                return category

        for phrase, category in self._category_phrases:
            if phrase in text:
                return category

        return self.default_category

    def image_for(self, category: str, variant_key: str = '') -> str:
        images = self.images.get(category) or self.images[self.default_category]
        if not variant_key:
            return images[0]
        return images[string_hash(variant_key) % len(images)]

    def categorize(self, search_text: str, variant_key: str = '') -> str:
        category = self.match_category(search_text)
        url = self.image_for(category, variant_key)
        log.debug(f'Placeholder: category={category} url={url}')
        return url
