"""Lost Ship - a solitaire dice game about a colony ship leaping home."""

__version__ = "0.1.0"
