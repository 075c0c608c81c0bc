"""Diagnostic tools for imported parks."""
from .minimap import render_minimap, export_minimap, ownership_counts, MinimapResult

__all__ = ['render_minimap', 'export_minimap', 'ownership_counts', 'MinimapResult']
