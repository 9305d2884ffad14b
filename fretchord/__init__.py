"""fretchord — chord voicing finder for guitars, extended-range guitars and basses."""

__version__ = "0.1.0"
