"""Backends for decision graph output generation (DOT, etc.)."""

from .dot_generator import DotMode, generate_dot, save_dot_file

__all__ = ["DotMode", "generate_dot", "save_dot_file"]
