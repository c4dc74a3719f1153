"""
website_meta.py — Find a provider's social-preview image on their website.

One GET per call, then a scan of the returned HTML for:
  1. <meta property="og:image" content="...">       → website_og
  2. <meta name="twitter:image" content="...">      → website_twitter
Attribute order, quote style and case don't matter.

Any failure (non-2xx, DNS, TLS, timeout, redirect loop, other transport
errors) comes back as WebsiteImage(None, none, failure=<kind>). Nothing is
raised to the caller and nothing is retried.

Wall-clock bound: the request runs on a small worker pool. The
`timeout_seconds` deadline starts when a worker picks the request up, and
the caller waits at most that long for it. The worker itself checks the same
deadline between body chunks, so a slow-drip server is cut off too. A
request that waits `timeout_seconds` without getting a worker is withdrawn
and reported as failure=busy; nothing was sent to the site.
"""

import re
import html
import time
import socket
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

import requests

from provider_images.config import FetchSettings
from provider_images.descriptor import ImageSource

log = logging.getLogger(__name__)

# Failure kinds
FAILURE_HTTP_STATUS = 'http_status'
FAILURE_DNS         = 'dns'
FAILURE_TLS         = 'tls'
FAILURE_TIMEOUT     = 'timeout'
FAILURE_REDIRECTS   = 'redirects'
FAILURE_INVALID_URL = 'invalid_url'
FAILURE_TRANSPORT   = 'transport'
FAILURE_BUSY        = 'busy'       # never fetched: no worker free in time

_META_TAG_RE = re.compile(r'<meta\b[^>]*>', re.IGNORECASE)
_ATTR_RE = re.compile(
    r'([\w:.-]+)\s*=\s*(?:"([^"]*)"|\'([^\']*)\'|([^\s"\'>]+))',
    re.IGNORECASE
)
_HEAD_END = b'</head>'

_DNS_MARKERS = (
    'nameresolutionerror',
    'name or service not known',
    'nodename nor servname',
    'getaddrinfo failed',
    'temporary failure in name resolution',
    'no address associated with hostname',
    'failed to resolve',
)


class FetchDeadlineExceeded(requests.Timeout):
    """Body download ran past the wall-clock deadline."""


@dataclass(frozen=True)
class WebsiteImage:
    image_url: Optional[str]
    source:    ImageSource
    failure:   Optional[str] = None

    @property
    def found(self) -> bool:
        return bool(self.image_url)

    @classmethod
    def miss(cls, failure: Optional[str] = None) -> 'WebsiteImage':
        return cls(image_url=None, source=ImageSource.NONE, failure=failure)


# ------------------------------------------------------------------ #
# HTML scanning
# ------------------------------------------------------------------ #

def _meta_attrs(tag: str) -> dict:
    attrs = {}
    for m in _ATTR_RE.finditer(tag[len('<meta'):]):
        name = m.group(1).lower()
        value = next((g for g in m.group(2, 3, 4) if g is not None), '')
        attrs.setdefault(name, value)
    return attrs


def find_meta_image(page: str, base_url: str = ''):
    """
    Return (image_url, ImageSource) for the first og:image, else the first
    twitter:image, else (None, ImageSource.NONE).
    """
    twitter = None
    for tag in _META_TAG_RE.findall(page or ''):
        attrs = _meta_attrs(tag)
        content = html.unescape(attrs.get('content', '')).strip()
        if not content:
            continue
        if attrs.get('property', '').strip().lower() == 'og:image':
            return urljoin(base_url, content), ImageSource.WEBSITE_OG
        if twitter is None and attrs.get('name', '').strip().lower() == 'twitter:image':
            twitter = content

    if twitter:
        return urljoin(base_url, twitter), ImageSource.WEBSITE_TWITTER
    return None, ImageSource.NONE


# ------------------------------------------------------------------ #
# Failure classification
# ------------------------------------------------------------------ #

def _exception_chain(exc: BaseException):
    seen = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend([current.__cause__, current.__context__])
        stack.extend(a for a in getattr(current, 'args', ()) if isinstance(a, BaseException))
        stack.append(getattr(current, 'reason', None))


def _looks_like_dns(exc: BaseException) -> bool:
    for err in _exception_chain(exc):
        if isinstance(err, socket.gaierror):
            return True
        text = f'{type(err).__name__} {err}'.lower()
        if any(marker in text for marker in _DNS_MARKERS):
            return True
    return False


def classify_failure(exc: BaseException) -> str:
    """Map a transport exception to one of the FAILURE_* kinds."""
    if isinstance(exc, requests.exceptions.SSLError):
        return FAILURE_TLS
    if isinstance(exc, requests.Timeout):
        return FAILURE_TIMEOUT
    if isinstance(exc, requests.TooManyRedirects):
        return FAILURE_REDIRECTS
    if isinstance(exc, (requests.exceptions.InvalidURL,
                        requests.exceptions.MissingSchema,
                        requests.exceptions.InvalidSchema)):
        return FAILURE_INVALID_URL
    if isinstance(exc, requests.ConnectionError) and _looks_like_dns(exc):
        return FAILURE_DNS
    return FAILURE_TRANSPORT


# ------------------------------------------------------------------ #
# Extractor
# ------------------------------------------------------------------ #

class WebsiteImageExtractor:
    """
    Args:
        settings:      FetchSettings (timeout, user agent, redirect and size caps)
        session:       requests.Session to use for every call (tests); by
                       default each worker thread gets its own
        max_fetches:   worker pool size, i.e. the most fetches in flight
    """

    def __init__(self,
                 settings: FetchSettings = None,
                 session: Optional[requests.Session] = None,
                 max_fetches: int = 8):
        self.settings = settings or FetchSettings()
        self._session = session
        self._local = threading.local()
        self._pool = ThreadPoolExecutor(max_workers=max_fetches,
                                        thread_name_prefix='website-meta')

    def _get_session(self) -> requests.Session:
        """Injected session, else one per worker thread."""
        if self._session is not None:
            return self._session
        if not hasattr(self._local, 'session'):
            session = requests.Session()
            session.max_redirects = self.settings.max_redirects
            self._local.session = session
        return self._local.session

    def _read_body(self, resp, deadline: float) -> str:
        chunks = []
        size = 0
        tail = b''
        for chunk in resp.iter_content(chunk_size=8192):
            if time.monotonic() > deadline:
                raise FetchDeadlineExceeded(f'Body not received within {self.settings.timeout_seconds}s')
            if not chunk:
                continue
            chunks.append(chunk)
            size += len(chunk)
            # Preview tags live in <head>; the closing tag may straddle two chunks
            window = tail + chunk.lower()
            if size >= self.settings.max_body_bytes or _HEAD_END in window:
                break
            tail = window[-(len(_HEAD_END) - 1):]

        raw = b''.join(chunks)
        encoding = resp.encoding or 'utf-8'
        try:
            return raw.decode(encoding, errors='replace')
        except LookupError:
            return raw.decode('utf-8', errors='replace')

    def _fetch(self, url: str, deadline: float) -> WebsiteImage:
        timeout = self.settings.timeout_seconds
        resp = self._get_session().get(
            url,
            headers={
                'User-Agent': self.settings.user_agent,
                'Accept': 'text/html,application/xhtml+xml,*/*;q=0.8',
                'Accept-Language': 'en-US,en;q=0.9',
            },
            timeout=(timeout, timeout),
            allow_redirects=True,
            stream=True,
        )
        try:
            if not 200 <= resp.status_code < 300:
                log.debug(f'HTTP {resp.status_code} for {url}')
                return WebsiteImage.miss(FAILURE_HTTP_STATUS)

            page = self._read_body(resp, deadline)
        finally:
            resp.close()

        image_url, source = find_meta_image(page, base_url=resp.url or url)
        if image_url:
            log.debug(f'{source.value} image for {url}: {image_url}')
            return WebsiteImage(image_url=image_url, source=source)

        log.debug(f'No preview image on {url}')
        return WebsiteImage.miss()

    def _timed_fetch(self, url: str, started: threading.Event, job: dict) -> WebsiteImage:
        job['deadline'] = time.monotonic() + self.settings.timeout_seconds
        started.set()
        return self._fetch(url, job['deadline'])

    def extract(self, url: str) -> WebsiteImage:
        """
        Fetch url and return its og:image / twitter:image. Never raises.
        """
        if not url or not str(url).strip().lower().startswith(('http://', 'https://')):
            log.debug(f'Skipping non-http website: {url!r}')
            return WebsiteImage.miss(FAILURE_INVALID_URL)

        url = str(url).strip()
        timeout = self.settings.timeout_seconds
        started = threading.Event()
        job = {}
        future = self._pool.submit(self._timed_fetch, url, started, job)

        if not started.wait(timeout) and future.cancel():
            log.debug(f'No fetch worker free within {timeout}s for {url}')
            return WebsiteImage.miss(FAILURE_BUSY)
        started.wait()

        try:
            return future.result(timeout=max(0.0, job['deadline'] - time.monotonic()))
        except FutureTimeout:
            future.cancel()
            log.debug(f'Timeout fetching {url}')
            return WebsiteImage.miss(FAILURE_TIMEOUT)
        except requests.RequestException as e:
            kind = classify_failure(e)
            log.debug(f'Website fetch failed ({kind}) for {url}: {e}')
            return WebsiteImage.miss(kind)
        except Exception as e:
            log.debug(f'Website fetch error for {url}: {e}')
            return WebsiteImage.miss(FAILURE_TRANSPORT)

    def close(self):
        """Stop accepting fetches; in-flight ones finish on their own timeouts."""
        self._pool.shutdown(wait=False)
