"""
Reactor Application - Owns the catalog loader and the playback session.
"""
import logging
import threading
from concurrent.futures import Future
from typing import Optional, Callable

from .models import Catalog, AppSnapshot
from .api import CatalogLoader
from .controllers import PlaybackSession, VolumeController
from .config import AUTO_ADVANCE

logger = logging.getLogger(__name__)


class ReactorApp:
    """
    Wires a catalog client to playback sessions.

    Each ready catalog gets a new session with a fresh audio resource; the
    previous session (and its resource) is closed first. Volume carries over.
    """

    def __init__(
        self,
        client,
        resource_factory: Callable[[], object],
        auto_advance: bool = AUTO_ADVANCE,
        on_change: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            client: CatalogClient (or NullCatalogClient in mock mode)
            resource_factory: Builds a new AudioResource for each session
            auto_advance: Passed to every session
            on_change: Called after the loader settles or the session changes
        """
        self.client = client
        self.resource_factory = resource_factory
        self.auto_advance = auto_advance
        self.on_change = on_change

        self.volume = VolumeController()
        self.loader = CatalogLoader(client)
        self.session: Optional[PlaybackSession] = None
        self._lock = threading.Lock()

    # ============================================
    # LIFECYCLE
    # ============================================

    def start(self) -> Future:
        """Begin loading the catalog in the background."""
        logger.info('Starting Reactor...')
        return self.loader.load(on_done=self._on_loaded)

    def reload(self) -> Future:
        """Fetch a fresh catalog; the session is replaced once it is ready."""
        logger.info('Reloading catalog')
        self.loader = CatalogLoader(self.client)
        return self.loader.load(on_done=self._on_loaded)

    def stop(self):
        """Tear down the session and release its resource."""
        with self._lock:
            session, self.session = self.session, None
        if session:
            session.close()
        self.client.close()
        logger.info('Reactor stopped')

    def _on_loaded(self, loader: CatalogLoader):
        if loader is not self.loader:
            logger.debug('Ignoring result of superseded catalog load')
            return
        if loader.status == 'ready':
            self.install(loader.catalog)
        else:
            logger.error(f'Catalog unavailable: {loader.error_message}')
            self._notify()

    def install(self, catalog: Catalog) -> PlaybackSession:
        """Replace the current session with one over catalog."""
        with self._lock:
            old = self.session
            if old:
                old.close()
            self.session = PlaybackSession(
                catalog,
                self.resource_factory(),
                volume=self.volume,
                auto_advance=self.auto_advance,
            )
            session = self.session
        self._notify()
        return session

    def _notify(self):
        if self.on_change:
            try:
                self.on_change()
            except Exception as e:
                logger.warning(f'on_change callback failed: {e}', exc_info=True)

    # ============================================
    # STATE
    # ============================================

    def snapshot(self) -> AppSnapshot:
        session = self.session
        return AppSnapshot(
            loader_status=self.loader.status,
            loader_error=self.loader.error_message,
            session=session.snapshot() if session else None,
        )
