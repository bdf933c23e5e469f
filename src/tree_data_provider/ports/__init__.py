"""Ports (protocols) the provider depends on."""

from __future__ import annotations

from .store import ChangeCallback, ITreeStore, NodeSnapshot, Unsubscribe

__all__ = [
    "ChangeCallback",
    "ITreeStore",
    "NodeSnapshot",
    "Unsubscribe",
]
