"""
Reactor Handlers - Input and event handling.
"""
from .events import EventChannel

__all__ = ['EventChannel']
