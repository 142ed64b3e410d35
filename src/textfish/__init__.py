"""textfish - fish that swim behind your text."""

__version__ = "0.3.0"
