"""Configuration package exports."""

from .model import SessionOptions

__all__ = ["SessionOptions"]
