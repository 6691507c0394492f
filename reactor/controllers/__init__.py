"""
Reactor Controllers - Playback session and volume state.
"""
from .volume import VolumeController
from .session import PlaybackSession

__all__ = ['VolumeController', 'PlaybackSession']
