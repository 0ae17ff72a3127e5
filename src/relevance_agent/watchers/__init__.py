"""Watcher implementations used by the relevance agent."""

from .file import FileObjectWatcher  # noqa: F401

__all__ = ["FileObjectWatcher"]
