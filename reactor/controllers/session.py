"""
Playback Session - Track selection, play state, volume and filtering
against one audio resource.

States:
- 'idle': no tracks (or closed), every command except set_filter is a no-op
- 'paused': a track is loaded but not playing
- 'playing': the resource acknowledged play for the active track
- 'errored': the resource rejected play or reported a failure

Every load is tagged with PlaybackTag(track_id, generation) and every play
request gets a request number. Acknowledgements and resource events that
carry anything other than the current tag/request are discarded, so a slow
answer for a track the user already left never touches state.
"""
import logging
import threading
from concurrent.futures import Future
from typing import Optional

from ..models import (
    Catalog, Track, FilteredView, PlaybackTag, AudioEvent,
    SessionSnapshot, PlayStatus,
)
from ..errors import PlaybackError
from ..config import AUTO_ADVANCE
from ..managers.navigation import clamp_index, wrap_index, build_filtered_view
from .volume import VolumeController

logger = logging.getLogger(__name__)


class PlaybackSession:
    """Owns the catalog, the active track and the single audio resource."""

    def __init__(
        self,
        catalog: Catalog,
        resource,
        volume: Optional[VolumeController] = None,
        auto_advance: bool = AUTO_ADVANCE,
    ):
        """
        Args:
            catalog: Tracks for this session (unfiltered, immutable)
            resource: AudioResource, exclusively owned from here on
            volume: Volume state, a fresh controller by default
            auto_advance: Move to the next track when the active one ends
        """
        self.catalog = catalog
        self.resource = resource
        self.volume = volume or VolumeController()
        self.auto_advance = auto_advance

        self._lock = threading.RLock()
        self.play_state: PlayStatus = 'idle'
        self.active_index: Optional[int] = None
        self.filter_text = ''
        self.last_error: Optional[PlaybackError] = None
        self._view = build_filtered_view(catalog, '')

        self._generation = 0
        self._tag: Optional[PlaybackTag] = None
        self._request_counter = 0
        self._pending_request: Optional[int] = None
        self._closed = False

        self._unsubscribe = resource.subscribe(self._on_audio_event)

        if catalog:
            self._engage(0, want_play=False)
        logger.info(f'Session ready with {len(catalog)} tracks')

    # ============================================
    # STATE
    # ============================================

    @property
    def active_track(self) -> Optional[Track]:
        if self.active_index is None:
            return None
        return self.catalog[self.active_index]

    @property
    def filtered_view(self) -> FilteredView:
        return self._view

    @property
    def is_pending(self) -> bool:
        """True while a play request awaits acknowledgement."""
        return self._pending_request is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def snapshot(self) -> SessionSnapshot:
        """Read-only view of everything the UI renders."""
        with self._lock:
            return SessionSnapshot(
                catalog=self.catalog,
                filtered_view=self._view,
                active_index=self.active_index,
                play_state=self.play_state,
                volume=self.volume.level,
                filter_text=self.filter_text,
                last_error=str(self.last_error) if self.last_error else None,
                is_loading=self.is_pending,
                is_playing=self._wants_play(),
            )

    def _ready(self) -> bool:
        return not self._closed and len(self.catalog) > 0

    def _wants_play(self) -> bool:
        return self.play_state == 'playing' or self.is_pending

    # ============================================
    # COMMANDS
    # ============================================

    def select_track(self, index: int):
        """Make catalog[index] active, clamping out-of-range input."""
        with self._lock:
            if not self._ready():
                return
            target = clamp_index(index, len(self.catalog))
            if target != index:
                logger.debug(f'Select {index} clamped to {target}')
            self._engage(target, want_play=self._wants_play())

    def select_filtered(self, row: int):
        """Select the track shown at a row of the filtered view."""
        with self._lock:
            if not self._ready():
                return
            index = self._view.to_absolute(row)
            if index is None:
                logger.debug(f'Ignoring filtered row {row} (view has {len(self._view)})')
                return
            self._engage(index, want_play=self._wants_play())

    def next(self):
        """Advance one track, wrapping from the last to the first."""
        self._step(1)

    def previous(self):
        """Go back one track, wrapping from the first to the last."""
        self._step(-1)

    def toggle_play(self):
        """Pause when playing (or about to), otherwise request play."""
        with self._lock:
            if not self._ready():
                return
            if self._wants_play():
                logger.info('Pausing...')
                self._pending_request = None
                self.resource.pause()
                self.play_state = 'paused'
            else:
                logger.info(f'Playing {self.active_track.title}')
                self._request_play()

    def set_volume(self, value: float):
        """Clamp to [0, 1] and apply to the live resource."""
        with self._lock:
            if not self._ready():
                return
            self.volume.set(value, self.resource)

    def step_volume(self, direction: int):
        with self._lock:
            if not self._ready():
                return
            self.volume.step(direction, self.resource)

    def set_filter(self, text: Optional[str]):
        """Update the filter. Leaves the active track and resource alone."""
        with self._lock:
            self.filter_text = text or ''
            self._view = build_filtered_view(self.catalog, self.filter_text)
            logger.debug(f'Filter {self.filter_text!r}: {len(self._view)}/{len(self.catalog)} tracks')

    def close(self):
        """Release the resource. The session is inert afterwards."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._unsubscribe()
            self._pending_request = None
            self._tag = None
            try:
                self.resource.pause()
                self.resource.release()
            except Exception as e:
                logger.warning(f'Error releasing audio resource: {e}', exc_info=True)
            self.play_state = 'idle'
            logger.info('Session closed')

    # ============================================
    # RESOURCE DRIVING
    # ============================================

    def _step(self, delta: int):
        with self._lock:
            if not self._ready():
                return
            target = wrap_index(self.active_index + delta, len(self.catalog))
            self._engage(target, want_play=self._wants_play())

    def _engage(self, index: int, want_play: bool):
        """Stop the current track, load catalog[index], optionally play it."""
        track = self.catalog[index]
        self.resource.pause()

        self._generation += 1
        self._tag = PlaybackTag(track.id, self._generation)
        self._pending_request = None
        self.active_index = index
        self.play_state = 'paused'
        self.last_error = None

        logger.info(f'Select {index}: {track.title} by {track.creator_name}')
        self.resource.load(track.audio_url, self._tag)
        self.volume.apply(self.resource)

        if want_play:
            self._request_play()

    def _request_play(self):
        self._request_counter += 1
        request = self._request_counter
        tag = self._tag
        self._pending_request = request

        try:
            future: Future = self.resource.play()
        except Exception as e:
            self._pending_request = None
            self._fail(PlaybackError.wrap(e, tag.track_id))
            return

        future.add_done_callback(lambda f: self._on_play_settled(tag, request, f))

    def _on_play_settled(self, tag: PlaybackTag, request: int, future: Future):
        with self._lock:
            if self._closed or tag != self._tag or request != self._pending_request:
                logger.debug(f'Discarding stale play ack for {tag}')
                return
            self._pending_request = None
            if future.cancelled():
                logger.debug(f'Play request for {tag} was cancelled')
                return
            exc = future.exception()
            if exc is not None:
                self._fail(PlaybackError.wrap(exc, tag.track_id))
                return
            self.play_state = 'playing'
            self.last_error = None
            logger.debug(f'Play acknowledged for {tag}')

    def _on_audio_event(self, event: AudioEvent):
        with self._lock:
            if self._closed or event.tag is None or event.tag != self._tag:
                logger.debug(f'Discarding stale {event.kind} event for {event.tag}')
                return

            if event.kind == 'error':
                self._pending_request = None
                self._fail(PlaybackError(
                    event.reason or 'Audio resource error',
                    track_id=event.tag.track_id,
                ))
            elif event.kind == 'ended':
                if self.play_state == 'playing' and self.auto_advance:
                    logger.info('Track ended, advancing')
                    self._step(1)
                else:
                    self.play_state = 'paused'

    def _fail(self, error: PlaybackError):
        self.play_state = 'errored'
        self.last_error = error
        logger.warning(f'Playback error on {error.track_id}: {error.reason}')
