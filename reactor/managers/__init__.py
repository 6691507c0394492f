"""
Reactor Managers - Navigation helpers.
"""
from .navigation import clamp_index, wrap_index, build_filtered_view

__all__ = ['clamp_index', 'wrap_index', 'build_filtered_view']
