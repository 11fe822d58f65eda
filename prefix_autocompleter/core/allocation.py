# allocation.py
# Per-store accounting of nodes and stored words.
# Every node/word the trie creates is registered here and every release is
# matched against it, so tests can check teardown frees each thing exactly once.
# An optional node budget turns "too many nodes" into AllocationError, which is
# how a bounded store reports exhaustion.

from __future__ import annotations

from typing import Dict

from .errors import AllocationError


class AllocationLedger:
    """
    Counters:
     - nodes_allocated / nodes_released
     - words_allocated / words_released
    max_nodes: 0 means unbounded
    """

    __slots__ = (
        "max_nodes",
        "nodes_allocated",
        "nodes_released",
        "words_allocated",
        "words_released",
    )

    def __init__(self, max_nodes: int = 0) -> None:
        if max_nodes < 0:
            raise ValueError("max_nodes must be >= 0")
        self.max_nodes = max_nodes
        self.nodes_allocated = 0
        self.nodes_released = 0
        self.words_allocated = 0
        self.words_released = 0

    @property
    def live_nodes(self) -> int:
        return self.nodes_allocated - self.nodes_released

    @property
    def live_words(self) -> int:
        return self.words_allocated - self.words_released

    def acquire_node(self) -> None:
        if self.max_nodes and self.live_nodes >= self.max_nodes:
            raise AllocationError(f"node budget exhausted ({self.max_nodes} nodes)")
        self.nodes_allocated += 1

    def release_node(self) -> None:
        if self.live_nodes <= 0:
            raise RuntimeError("node released more times than allocated")
        self.nodes_released += 1

    def acquire_word(self) -> None:
        self.words_allocated += 1

    def release_word(self) -> None:
        if self.live_words <= 0:
            raise RuntimeError("word released more times than allocated")
        self.words_released += 1

    def snapshot(self) -> Dict[str, int]:
        return {
            "max_nodes": self.max_nodes,
            "nodes_allocated": self.nodes_allocated,
            "nodes_released": self.nodes_released,
            "live_nodes": self.live_nodes,
            "words_allocated": self.words_allocated,
            "words_released": self.words_released,
            "live_words": self.live_words,
        }
