"""
Pytest configuration and shared fixtures for Reactor tests.
"""
from concurrent.futures import Future
from pathlib import Path
from typing import List, Optional

import pytest

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from reactor.models import Track, Catalog, AudioEvent, PlaybackTag
from reactor.handlers import EventChannel


class FakeAudioResource:
    """Audio resource whose play futures are resolved by the test."""

    def __init__(self):
        self.events = EventChannel()
        self.source: Optional[str] = None
        self.tag: Optional[PlaybackTag] = None
        self.volume = 1.0
        self.playing = False
        self.released = False
        self.loads: List[str] = []
        self.pauses = 0
        self.plays: List[Future] = []

    def load(self, url, tag):
        self.source = url
        self.tag = tag
        self.playing = False
        self.loads.append(url)

    def play(self):
        future = Future()
        self.plays.append(future)
        return future

    def pause(self):
        self.pauses += 1
        self.playing = False

    def release(self):
        self.released = True
        self.source = None

    def subscribe(self, listener):
        return self.events.subscribe(listener)

    # Test helpers

    def ack(self, index=-1):
        """Resolve a play request successfully."""
        self.playing = True
        self.plays[index].set_result(None)

    def reject(self, reason='NotAllowedError', index=-1):
        """Fail a play request."""
        self.plays[index].set_exception(RuntimeError(reason))

    def emit(self, kind, tag=None, reason=None):
        self.events.publish(AudioEvent(kind, tag if tag is not None else self.tag, reason))


def make_track(n, title=None, creator=None) -> Track:
    return Track(
        id=f't{n}',
        title=title or f'Track {n}',
        creator_name=creator or f'artist{n}',
        audio_url=f'https://cdn.example.com/audio/{n}.mp3',
    )


@pytest.fixture
def resource():
    return FakeAudioResource()


@pytest.fixture
def catalog():
    """Three-track catalog [T0, T1, T2]."""
    return Catalog([make_track(0), make_track(1), make_track(2)])


@pytest.fixture
def session(catalog, resource):
    from reactor.controllers import PlaybackSession
    s = PlaybackSession(catalog, resource)
    yield s
    s.close()


@pytest.fixture
def sample_records():
    """Raw project records as served by the catalog endpoint."""
    return [
        {
            '_id': 'p1', 'title': 'Catalog A', 'username': 'ada',
            'audio': 'https://cdn.example.com/a.mp3', 'isPublicProject': True,
            'mainImageURL': 'https://cdn.example.com/a.png',
            'backgroundImageURL': 'https://cdn.example.com/a-bg.png',
            'likes': 12, 'rating': 4.2,
        },
        {
            '_id': 'p2', 'title': 'Hidden', 'username': 'bob',
            'audio': 'https://cdn.example.com/b.mp3', 'isPublicProject': False,
            'likes': 3, 'rating': 3,
        },
        {
            '_id': 'p3', 'title': 'No Audio', 'username': 'cy',
            'audio': '', 'isPublicProject': True,
        },
        {
            '_id': 'p4', 'title': 'Dog song', 'username': 'dee',
            'audio': 'https://cdn.example.com/d.mp3', 'isPublicProject': True,
            'likes': 0, 'rating': 5,
        },
    ]
