"""
resolver.py — Resolve one display image per provider.

Step flow for resolve(descriptor):
  1  existing image_url on the record      → existing
  2  durable id already in the cache        → existing
  3  website og:image / twitter:image       → website_og / website_twitter
  4  keyword-matched placeholder            → placeholder (always succeeds)
  5  durable provider → cache.put()         (fire-and-forget; skipped when
                                             the website was never fetched)

resolve() never raises and never returns an empty image for a valid
descriptor. resolve_many() runs a batch on a bounded thread pool.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import requests

from provider_images.avatar import avatar_data_url
from provider_images.cache import ResolutionCache
from provider_images.config import ResolverConfig
from provider_images.descriptor import ImageSource, ProviderDescriptor, ResolutionResult
from provider_images.icons import IconAssigner, IconAssignment
from provider_images.placeholder import PlaceholderCategorizer
from provider_images.website_meta import FAILURE_BUSY, WebsiteImage, WebsiteImageExtractor

log = logging.getLogger(__name__)


class ImageResolver:
    """
    Args:
        extractor:   WebsiteImageExtractor
        categorizer: PlaceholderCategorizer
        icons:       IconAssigner
        cache:       ResolutionCache, or None to skip caching entirely
        max_workers: default pool size for resolve_many()
    """

    def __init__(self,
                 extractor: WebsiteImageExtractor,
                 categorizer: PlaceholderCategorizer,
                 icons: IconAssigner,
                 cache: Optional[ResolutionCache] = None,
                 max_workers: int = 4):
        self.extractor = extractor
        self.categorizer = categorizer
        self.icons = icons
        self.cache = cache
        self.max_workers = max_workers

    @classmethod
    def from_config(cls,
                    config: ResolverConfig = None,
                    store=None,
                    session: Optional[requests.Session] = None) -> 'ImageResolver':
        """Wire every component from one ResolverConfig."""
        config = config or ResolverConfig()
        return cls(
            extractor=WebsiteImageExtractor(config.fetch, session=session,
                                            max_fetches=max(config.max_workers, 1) * 2),
            categorizer=PlaceholderCategorizer(config.placeholders),
            icons=IconAssigner(config.icons.keyword_icons,
                               config.icons.fallback_icons,
                               config.icons.palette),
            cache=ResolutionCache(store, write_workers=config.cache_write_workers),
            max_workers=config.max_workers,
        )

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #

    def _cached(self, descriptor: ProviderDescriptor) -> Optional[str]:
        if self.cache is None or not descriptor.is_durable:
            return None
        return self.cache.get(descriptor.identity)

    def _from_website(self, descriptor: ProviderDescriptor) -> WebsiteImage:
        found = self.extractor.extract(descriptor.website_url)
        if found.failure:
            log.debug(f'  Website lookup failed ({found.failure}) for {descriptor.identity}')
        return found

    def _placeholder(self, descriptor: ProviderDescriptor) -> ResolutionResult:
        text = descriptor.text
        url = self.categorizer.categorize(text.search_text, text.variant_key)
        return ResolutionResult(url, ImageSource.PLACEHOLDER)

    def _persist(self, descriptor: ProviderDescriptor, result: ResolutionResult):
        if self.cache is None or not descriptor.is_durable:
            return
        try:
            self.cache.put(descriptor.identity, result.image_url, durable=True)
        except Exception as e:
            log.error(f'  Cache write not scheduled for {descriptor.identity}: {e}')

    # ------------------------------------------------------------------ #
    # Public interface
    # ------------------------------------------------------------------ #

    def resolve(self, descriptor: ProviderDescriptor) -> ResolutionResult:
        if descriptor is None:
            log.warning('resolve() called without a descriptor')
            return ResolutionResult(None, ImageSource.NONE)

        # ── Step 1: image already on the record ───────────────────────
        if descriptor.existing_image_url:
            return ResolutionResult(descriptor.existing_image_url, ImageSource.EXISTING)

        # ── Step 2: resolved on an earlier run ────────────────────────
        cached = self._cached(descriptor)
        if cached:
            log.debug(f'Cache hit for {descriptor.identity}')
            return ResolutionResult(cached, ImageSource.EXISTING)

        # ── Steps 3–4: website, then placeholder ──────────────────────
        result = None
        website_untried = False
        if descriptor.website_url:
            found = self._from_website(descriptor)
            if found.found:
                result = ResolutionResult(found.image_url, found.source)
            website_untried = found.failure == FAILURE_BUSY
        if result is None:
            result = self._placeholder(descriptor)

        log.info(
            f'Resolved {(descriptor.display_name or descriptor.identity)!r}: '
            f'source={result.source.value}'
        )

        # ── Step 5: write through for saved providers ─────────────────
        if website_untried:
            log.debug(f'  Website never fetched for {descriptor.identity}; placeholder not saved')
        else:
            self._persist(descriptor, result)
        return result

    def resolve_many(self, descriptors: List[ProviderDescriptor],
                     max_workers: Optional[int] = None) -> List[ResolutionResult]:
        """Resolve a batch concurrently; results come back in input order."""
        descriptors = list(descriptors)
        if not descriptors:
            return []
        workers = max(1, min(max_workers or self.max_workers, len(descriptors)))
        with ThreadPoolExecutor(max_workers=workers,
                                thread_name_prefix='image-resolve') as executor:
            return list(executor.map(self.resolve, descriptors))

    def assign_icon(self, descriptor: ProviderDescriptor) -> IconAssignment:
        return self.icons.assign(descriptor.icon_identity, descriptor.text.specialties_text)

    def avatar_for(self, descriptor: ProviderDescriptor) -> str:
        """Emoji SVG data: URL for cards that show an avatar instead of a photo."""
        text = descriptor.text
        return avatar_data_url(text.display_name, text.specialties, descriptor.identity)

    def close(self):
        """Wait for pending cache writes and release worker threads."""
        if self.cache is not None:
            self.cache.close()
        self.extractor.close()
