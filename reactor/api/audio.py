"""
Audio Resources - Playable-media backends driven by the playback session.

Any object with this shape works as a resource:
    load(url, tag)      point the resource at a new asset
    play() -> Future    resolves on start, fails with PlaybackError
    pause()             synchronous
    volume              settable float 0.0-1.0
    release()           stop and free the asset
    subscribe(cb)       AudioEvent notifications, returns an unsubscribe callable
"""
import hashlib
import logging
import threading
import time
from concurrent.futures import Future
from pathlib import Path
from typing import Optional, Callable, Protocol

import pygame
import requests

from ..models import AudioEvent, PlaybackTag
from ..errors import PlaybackError
from ..handlers import EventChannel
from ..config import CACHE_DIR, FETCH_TIMEOUT, MIXER_FREQUENCY, MIXER_POLL_INTERVAL
from ..utils import run_async, clamp

logger = logging.getLogger(__name__)


class AudioResource(Protocol):
    volume: float

    def load(self, url: str, tag: PlaybackTag) -> None: ...

    def play(self) -> Future: ...

    def pause(self) -> None: ...

    def release(self) -> None: ...

    def subscribe(self, listener: Callable[[AudioEvent], None]) -> Callable[[], None]: ...


class NullAudioResource:
    """No-op resource for mock mode. Acknowledges play instantly."""

    def __init__(self):
        self.events = EventChannel()
        self.source: Optional[str] = None
        self.tag: Optional[PlaybackTag] = None
        self.playing = False
        self._volume = 1.0

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float):
        self._volume = clamp(value, 0.0, 1.0)

    def load(self, url: str, tag: PlaybackTag):
        self.source = url
        self.tag = tag
        self.playing = False
        logger.debug(f'Mock load: {url}')

    def play(self) -> Future:
        future: Future = Future()
        if self.source is None:
            future.set_exception(PlaybackError('No source loaded'))
        else:
            self.playing = True
            future.set_result(self.tag)
        return future

    def pause(self):
        self.playing = False

    def release(self):
        self.playing = False
        self.source = None
        self.tag = None

    def subscribe(self, listener):
        return self.events.subscribe(listener)


class MixerAudioResource:
    """
    pygame.mixer backed resource.

    Remote assets are downloaded to the cache directory in the background
    on the first play. The mixer streams one file at a time, so the
    previous asset is stopped whenever a new one is loaded.
    """

    def __init__(self, cache_dir: Path = CACHE_DIR, timeout: float = FETCH_TIMEOUT):
        if not pygame.mixer.get_init():
            pygame.mixer.init(frequency=MIXER_FREQUENCY)

        self.cache_dir = cache_dir
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.timeout = timeout
        self.http = requests.Session()
        self.events = EventChannel()

        self.source: Optional[str] = None
        self.tag: Optional[PlaybackTag] = None
        self._volume = 1.0
        self._loaded_path: Optional[Path] = None
        self._started = False  # Mixer is playing our current tag
        self._paused = False
        self._want_play = False  # Cleared by pause/load; checked before the mixer starts
        self._lock = threading.Lock()

        self._running = True
        self._monitor = threading.Thread(target=self._watch_end, daemon=True)
        self._monitor.start()

    # ============================================
    # RESOURCE INTERFACE
    # ============================================

    @property
    def volume(self) -> float:
        return self._volume

    @volume.setter
    def volume(self, value: float):
        self._volume = clamp(value, 0.0, 1.0)
        pygame.mixer.music.set_volume(self._volume)

    def load(self, url: str, tag: PlaybackTag):
        with self._lock:
            pygame.mixer.music.stop()
            self.source = url
            self.tag = tag
            self._loaded_path = None
            self._started = False
            self._paused = False
            self._want_play = False
        logger.info(f'Mixer load: {url}')

    def play(self) -> Future:
        with self._lock:
            url, tag = self.source, self.tag
            if url is not None:
                self._want_play = True
        if url is None:
            future: Future = Future()
            future.set_exception(PlaybackError('No source loaded'))
            return future
        return run_async(self._start, url, tag)

    def pause(self):
        with self._lock:
            self._want_play = False
            if self._started:
                pygame.mixer.music.pause()
                self._paused = True

    def release(self):
        self._running = False
        with self._lock:
            pygame.mixer.music.stop()
            self.source = None
            self.tag = None
            self._started = False
            self._want_play = False
        self.events.clear()
        self.http.close()
        if threading.current_thread() is not self._monitor:
            self._monitor.join(timeout=MIXER_POLL_INTERVAL * 4)

    def subscribe(self, listener):
        return self.events.subscribe(listener)

    # ============================================
    # BACKGROUND WORK
    # ============================================

    def _cache_path(self, url: str) -> Path:
        digest = hashlib.md5(url.encode()).hexdigest()[:16]
        suffix = Path(url.split('?', 1)[0]).suffix or '.mp3'
        return self.cache_dir / f'{digest}{suffix}'

    def _download(self, url: str) -> Path:
        path = self._cache_path(url)
        if path.exists():
            return path
        try:
            resp = self.http.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise PlaybackError(f'Could not download audio: {e}') from e
        tmp = path.with_suffix(path.suffix + '.tmp')
        tmp.write_bytes(resp.content)
        tmp.replace(path)
        return path

    def _start(self, url: str, tag: PlaybackTag) -> PlaybackTag:
        """Download if needed, then start or resume the mixer."""
        path = self._download(url)
        with self._lock:
            if tag != self.tag or not self._want_play:
                logger.debug(f'Not starting {path.name}: superseded or paused while downloading')
                return tag
            music = pygame.mixer.music
            try:
                if self._started and self._loaded_path == path:
                    if self._paused:
                        music.unpause()
                else:
                    music.load(str(path))
                    music.set_volume(self._volume)
                    music.play()
                    self._loaded_path = path
            except pygame.error as e:
                raise PlaybackError(f'Mixer could not play {path.name}: {e}') from e
            self._started = True
            self._paused = False
        return tag

    def _watch_end(self):
        """Publish 'ended' when the mixer finishes the current asset, 'error' when it fails."""
        while self._running:
            time.sleep(MIXER_POLL_INTERVAL)
            event = None
            with self._lock:
                if self._started and not self._paused:
                    try:
                        busy = pygame.mixer.music.get_busy()
                    except pygame.error as e:
                        self._started = False
                        event = AudioEvent('error', self.tag, f'Mixer failed during playback: {e}')
                    else:
                        if not busy:
                            self._started = False
                            event = AudioEvent('ended', self.tag)
            if event is not None:
                self.events.publish(event)
