"""DOOM-themed side-scrolling platformer: simulation core plus a pygame-ce shell."""

__version__ = "0.1.0"
