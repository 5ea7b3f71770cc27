"""MagnetSearch — Magnet link resolution and multi-adapter torrent search."""

__version__ = "0.1.0"
