"""
Port Types - The kinds of signal that flow along node connections.

This module defines:
- PortKind: Enum of the signal kinds a port can carry (MIDI, Audio)
- InputPolicy: Whether an unconnected input may hold a local value

Two ports can only be wired together when their kinds are identical;
there is no implicit conversion between MIDI and audio.
"""

from __future__ import annotations

from enum import Enum, auto


class PortKind(Enum):
    """
    Enumeration of signal kinds that can flow through node connections.

    Each input/output port has a PortKind that determines what
    kinds of connections are valid.
    """
    MIDI = auto()    # Note/controller events
    AUDIO = auto()   # Sample stream

    def is_compatible_with(self, other: PortKind) -> bool:
        """Check if this kind can connect to another kind."""
        return self == other

    def display_name(self) -> str:
        """Human-readable name shown next to ports."""
        return _DISPLAY_NAMES[self]

    def display_color(self) -> str:
        """Hex color used to draw ports and wires of this kind."""
        return _DISPLAY_COLORS[self]


_DISPLAY_NAMES = {
    PortKind.MIDI: "MIDI",
    PortKind.AUDIO: "Audio",
}

_DISPLAY_COLORS = {
    PortKind.MIDI: "#ffd700",    # Gold
    PortKind.AUDIO: "#00bfff",   # Deep sky blue
}


class InputPolicy(Enum):
    """Whether an input accepts a locally-set value when nothing is wired to it."""
    CONNECTION_ONLY = "connection_only"
    ALLOW_CONSTANT = "allow_constant"
