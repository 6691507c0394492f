"""
Reactor - Project catalog browser and DJ-style playback controller.
"""
__version__ = '0.1.0'
