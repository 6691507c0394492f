"""
Reactor API modules - External service integrations.
"""
from .catalog import CatalogClient, NullCatalogClient, CatalogLoader, parse_catalog
from .audio import AudioResource, NullAudioResource, MixerAudioResource

__all__ = [
    'CatalogClient', 'NullCatalogClient', 'CatalogLoader', 'parse_catalog',
    'AudioResource', 'NullAudioResource', 'MixerAudioResource',
]
