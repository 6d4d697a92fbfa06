"""anolekit: writing functions in Python, worked through a lizard dataset."""

__version__ = "0.1.0"
