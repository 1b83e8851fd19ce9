"""
Output generation module.
"""

from .asset_json import AssetJson
from .exporter import GameExporter

__all__ = ['AssetJson', 'GameExporter']
