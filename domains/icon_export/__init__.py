"""
Icon Export Domain

Watches a folder for SVG sources and keeps a multi-size ICO next to each:
- Watchers -> normalise filesystem notifications into touch events
- Scanners -> feed files present at startup through the same path
- Jobs -> debounce, supersede and retry conversions per file
- Converters -> rasterize and pack the icon
"""

__all__ = ["converters", "jobs", "scanners", "watchers"]
