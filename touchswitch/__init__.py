"""
Touchswitch

Gesture-driven window switcher engine: windows animate into a horizontal
filmstrip of scaled thumbnails that can be panned, flicked, dragged up/down
for an action, or tapped to select.
"""

__version__ = "1.0.0"
__author__ = "NixOS Configuration Team"
