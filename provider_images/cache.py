"""
cache.py — Write-through cache of resolved images, keyed by provider id.

put() updates an in-process map immediately and hands the store write to a
background executor, so a slow or failing database never delays the result
already computed for the caller. Failed writes are logged and dropped.

get() only looks at the in-process map. An image already stored in the
database arrives on the provider record itself, so it never needs a
separate query here.

Only durable (saved) providers are cached. There is no expiry and no
refresh: once an id has an image it keeps it until someone calls put()
again.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Optional

log = logging.getLogger(__name__)


class ResolutionCache:
    """
    Args:
        store:         object with update_image(id, url),
                       normally database.provider_store.SupabaseProviderStore;
                       None keeps the cache in-process only
        write_workers: background threads for store writes
    """

    def __init__(self, store=None, write_workers: int = 2):
        self.store = store
        self._entries: dict = {}
        self._lock = threading.Lock()
        self._pending: set = set()
        self._executor = ThreadPoolExecutor(max_workers=write_workers,
                                            thread_name_prefix='image-cache')

    def get(self, provider_id: str) -> Optional[str]:
        if not provider_id:
            return None

        with self._lock:
            return self._entries.get(provider_id)

    def _write(self, provider_id: str, image_url: str):
        try:
            self.store.update_image(provider_id, image_url)
        except Exception as e:
            log.error(f'Image write failed for provider {provider_id}: {e}')

    def _done(self, future: Future):
        with self._lock:
            self._pending.discard(future)

    def put(self, provider_id: str, image_url: str, durable: bool = True) -> Optional[Future]:
        """
        Record image_url for provider_id and schedule the store write.

        Returns the write Future (None when nothing was scheduled). Callers
        are not expected to wait on it.
        """
        if not durable:
            log.warning(f'Refusing to cache image for ephemeral provider {provider_id!r}')
            return None
        if not provider_id or not image_url:
            log.warning(f'Refusing to cache empty entry: id={provider_id!r} url={image_url!r}')
            return None

        with self._lock:
            self._entries[provider_id] = image_url

        if self.store is None:
            return None

        try:
            future = self._executor.submit(self._write, provider_id, image_url)
        except RuntimeError as e:
            log.error(f'Image write not scheduled for provider {provider_id}: {e}')
            return None

        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._done)
        return future

    def flush(self, timeout: Optional[float] = None):
        """Block until every scheduled store write has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            log.debug(f'Waiting for {len(pending)} image write(s)')
            wait(pending, timeout=timeout)

    def close(self):
        self.flush()
        self._executor.shutdown(wait=True)
