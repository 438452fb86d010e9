"""Durable counter and badge storage."""

from .counter_store import CounterStore, badges_path_for

__all__ = ["CounterStore", "badges_path_for"]
