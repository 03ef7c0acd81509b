"""IPTV Player - M3U playlist browser and player built with Flet."""

__version__ = "0.2.0"
