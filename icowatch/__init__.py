"""Application package for the SVG -> ICO exporter."""

__version__ = "1.0.0"
