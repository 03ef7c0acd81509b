#!/usr/bin/env python3
"""IPTV Player - A cross-platform IPTV player built with Python Flet."""
import flet as ft
from iptv_player.app import main


if __name__ == "__main__":
    ft.app(target=main)
