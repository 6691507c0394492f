"""
Event Channel - Inbound notifications from an audio resource.
"""
import logging
import threading
from typing import Callable, List

from ..models import AudioEvent

logger = logging.getLogger(__name__)

AudioListener = Callable[[AudioEvent], None]


class EventChannel:
    """Fan-out of audio events to subscribers."""

    def __init__(self):
        self._listeners: List[AudioListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: AudioListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: AudioEvent):
        """Deliver an event to every current listener."""
        with self._lock:
            listeners = list(self._listeners)
        logger.debug(f'Audio event: {event.kind} tag={event.tag} reason={event.reason}')
        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                logger.warning(f'Error handling audio event {event.kind}: {e}', exc_info=True)

    def clear(self):
        """Drop all listeners."""
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)
