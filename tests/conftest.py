import threading
import time

import pytest

from provider_images.config import ResolverConfig
from provider_images.resolver import ImageResolver


class FakeResponse:
    def __init__(self, body='', status_code=200, url=None,
                 encoding='utf-8', chunk_delay=0.0, chunk_size=None):
        self.body = body.encode('utf-8') if isinstance(body, str) else body
        self.status_code = status_code
        self.url = url
        self.encoding = encoding
        self.chunk_delay = chunk_delay
        self.forced_chunk_size = chunk_size
        self.closed = False
        self.chunks_sent = 0

    def iter_content(self, chunk_size=1):
        size = self.forced_chunk_size or chunk_size
        for i in range(0, len(self.body), size):
            if self.chunk_delay:
                time.sleep(self.chunk_delay)
            self.chunks_sent += 1
            yield self.body[i:i + size]

    def close(self):
        self.closed = True


class FakeSession:
    """
    Maps URL → FakeResponse, exception instance, or callable(url, **kw).
    Unknown URLs get a 404.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self._lock = threading.Lock()

    def get(self, url, **kwargs):
        with self._lock:
            self.calls.append((url, kwargs))
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status_code=404, url=url)
        if isinstance(route, BaseException):
            raise route
        if callable(route):
            return route(url, **kwargs)
        if route.url is None:
            route.url = url
        return route


class FakeStore:
    def __init__(self, images=None, fail_writes=False, read_delay=0.0, write_delay=0.0,
                 rows=None):
        self.images = dict(images or {})
        self.rows = list(rows or [])
        self.fail_writes = fail_writes
        self.read_delay = read_delay
        self.write_delay = write_delay
        self.writes = []
        self.reads = []

    def get_image(self, provider_id):
        self.reads.append(provider_id)
        if self.read_delay:
            time.sleep(self.read_delay)
        return self.images.get(provider_id)

    def update_image(self, provider_id, image_url):
        if self.write_delay:
            time.sleep(self.write_delay)
        if self.fail_writes:
            raise ConnectionError('database unavailable')
        self.writes.append((provider_id, image_url))
        self.images[provider_id] = image_url

    def load_providers_missing_images(self, limit=None):
        rows = [r for r in self.rows if not r.get('image_url')]
        return rows[:limit] if limit else rows


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def resolver(session, store):
    r = ImageResolver.from_config(ResolverConfig(), store=store, session=session)
    yield r
    r.close()
