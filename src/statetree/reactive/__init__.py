"""Reactive observation backends for getter caching and watching."""

from statetree.reactive.protocol import ObservationService
from statetree.reactive.versioned import ComputedView, VersionedObserver

__all__ = [
    "ObservationService",
    "VersionedObserver",
    "ComputedView",
]
