"""Command-line interface for Chat Adapter."""

from .main import cli

__all__ = ["cli"]
