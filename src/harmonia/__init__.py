"""
Harmonia - Node-graph editor for audio/MIDI signal routing.
"""

__version__ = "0.1.0"
