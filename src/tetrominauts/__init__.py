"""Tetrominauts: a falling-block puzzle engine with naut pieces."""

__version__ = "0.1.0"
