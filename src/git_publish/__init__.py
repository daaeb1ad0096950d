"""Create and push version tags on branches without switching to them."""

__version__ = "0.1.0"
