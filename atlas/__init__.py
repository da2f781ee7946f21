"""Local Weather Atlas - current conditions with outfit suggestions."""

__version__ = "0.1.0"
