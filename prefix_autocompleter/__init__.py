"""Frequency-ranked prefix autocompleter (in-memory, single-threaded)."""

from .core import (
    AllocationError,
    InvalidArgument,
    PrefixTrie,
    PrefixTrieError,
    autocomplete,
    create,
    destroy,
    insert,
)

__all__ = [
    "AllocationError",
    "InvalidArgument",
    "PrefixTrie",
    "PrefixTrieError",
    "autocomplete",
    "create",
    "destroy",
    "insert",
]

__version__ = "0.1.0"
