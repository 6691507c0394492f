"""
Catalog Loader - Fetches the project catalog from the Reactor endpoint.

Handles:
- One HTTP GET of the project list (no retry)
- Filtering to public projects that carry audio
- Mapping raw project records to Tracks
- The loading/ready/error lifecycle
"""
import logging
import threading
from concurrent.futures import Future
from typing import Optional, List, Callable, Any

import requests

from ..models import Track, Catalog, LoaderStatus
from ..errors import FetchError, DecodeError
from ..config import FETCH_TIMEOUT, RATING_MIN, RATING_MAX
from ..utils import run_async, clamp

logger = logging.getLogger(__name__)


class MalformedRecord(ValueError):
    """A public, playable record lacks fields required to build a Track."""


# ============================================
# RECORD DECODING
# ============================================

def is_playable(record: dict) -> bool:
    """True for public records with a non-empty audio locator."""
    audio = record.get('audio')
    return (
        isinstance(audio, str) and audio.strip() != ''
        and record.get('isPublicProject') is True
    )


def _required_text(record: dict, key: str) -> str:
    value = record.get(key)
    if not isinstance(value, str) or not value.strip():
        raise MalformedRecord(f'missing {key!r}')
    return value


def _optional_text(record: dict, key: str) -> Optional[str]:
    value = record.get(key)
    if isinstance(value, str) and value:
        return value
    return None


def record_to_track(record: dict) -> Track:
    """Map a raw project record to a Track. Raises MalformedRecord."""
    title = _required_text(record, 'title')
    creator = _required_text(record, 'username')
    audio_url = record['audio']

    try:
        likes = int(record.get('likes') or 0)
        rating = float(record.get('rating') or 0)
    except (TypeError, ValueError) as e:
        raise MalformedRecord(f'bad numeric field: {e}') from e

    track_id = record.get('_id') or record.get('id')
    if track_id is None or track_id == '':
        track_id = audio_url

    return Track(
        id=str(track_id),
        title=title,
        creator_name=creator,
        audio_url=audio_url,
        cover_image_url=_optional_text(record, 'mainImageURL'),
        background_image_url=_optional_text(record, 'backgroundImageURL'),
        like_count=max(0, likes),
        rating=clamp(rating, RATING_MIN, RATING_MAX),
    )


def parse_catalog(payload: Any) -> Catalog:
    """Build a Catalog from a decoded JSON payload. Raises DecodeError."""
    if not isinstance(payload, list):
        raise DecodeError(f'Expected a JSON array of projects, got {type(payload).__name__}')

    tracks: List[Track] = []
    rejected = 0
    for position, record in enumerate(payload):
        if not isinstance(record, dict):
            raise DecodeError(f'Project #{position} is {type(record).__name__}, not an object')
        if not is_playable(record):
            continue
        try:
            tracks.append(record_to_track(record))
        except MalformedRecord as e:
            rejected += 1
            logger.warning(f'Skipping malformed project #{position}: {e}')

    return Catalog(tracks, rejected=rejected)


# ============================================
# HTTP CLIENT
# ============================================

class CatalogClient:
    """HTTP client for the project list endpoint."""

    def __init__(self, url: str, timeout: float = FETCH_TIMEOUT):
        self.url = url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers['Accept'] = 'application/json'

    def fetch(self) -> Catalog:
        """Fetch and decode the catalog once. Raises FetchError or DecodeError."""
        logger.info(f'Fetching catalog from {self.url}')
        try:
            resp = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f'Catalog request failed: {e}', exc_info=True)
            raise FetchError(f'Catalog request failed: {e}') from e

        if not resp.ok:
            logger.warning(f'Catalog fetch failed: {resp.status_code}')
            raise FetchError(
                f'Catalog request returned HTTP {resp.status_code}',
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise DecodeError(f'Catalog response is not valid JSON: {e}') from e

        catalog = parse_catalog(payload)
        logger.info(f'Loaded {len(catalog)} playable tracks ({catalog.rejected} rejected)')
        return catalog

    def close(self):
        self.session.close()


class NullCatalogClient:
    """Client returning built-in data for UI testing (mock mode)."""

    url = 'mock://catalog'

    def fetch(self) -> Catalog:
        return parse_catalog(MOCK_PROJECTS)

    def close(self):
        pass


MOCK_PROJECTS = [
    {
        '_id': 'mock1', 'title': 'Neon Drift', 'username': 'kai',
        'audio': 'https://example.com/audio/neon-drift.mp3',
        'isPublicProject': True, 'likes': 42, 'rating': 4.5,
        'mainImageURL': 'https://example.com/img/neon-drift.png',
    },
    {
        '_id': 'mock2', 'title': 'Catalog Dreams', 'username': 'mira',
        'audio': 'https://example.com/audio/catalog-dreams.mp3',
        'isPublicProject': True, 'likes': 7, 'rating': 3.8,
    },
    {
        '_id': 'mock3', 'title': 'Dog Song', 'username': 'rex',
        'audio': 'https://example.com/audio/dog-song.mp3',
        'isPublicProject': True, 'likes': 120, 'rating': 4.9,
    },
    {
        '_id': 'mock4', 'title': 'Private Sketch', 'username': 'kai',
        'audio': 'https://example.com/audio/private.mp3',
        'isPublicProject': False, 'likes': 0, 'rating': 0,
    },
    {
        '_id': 'mock5', 'title': 'Silent Poster', 'username': 'mira',
        'isPublicProject': True, 'likes': 3, 'rating': 2.0,
    },
]


# ============================================
# LIFECYCLE
# ============================================

class CatalogLoader:
    """
    Loads the catalog once and tracks the loading/ready/error lifecycle.

    Terminal on error: a new loader (or `reload` on the app) is needed to try again.
    """

    def __init__(self, client):
        self.client = client
        self.status: LoaderStatus = 'loading'
        self.catalog: Optional[Catalog] = None
        self.error: Optional[Exception] = None
        self._lock = threading.Lock()
        self._future: Optional[Future] = None

    def load(self, on_done: Optional[Callable[['CatalogLoader'], None]] = None) -> Future:
        """Start the fetch in the background. Returns a Future for the Catalog."""
        with self._lock:
            if self._future is not None:
                return self._future
            self.status = 'loading'
            self._future = run_async(self.client.fetch)

        def settle(future: Future):
            exc = future.exception()
            with self._lock:
                if exc is None:
                    self.catalog = future.result()
                    self.status = 'ready'
                else:
                    self.error = exc
                    self.status = 'error'
                    logger.error(f'Catalog load failed: {exc}')
            if on_done:
                on_done(self)

        self._future.add_done_callback(settle)
        return self._future

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None
