"""
prefix_autocompleter.core

The trie engine:
 - PrefixTrie store with insert / autocomplete / destroy
 - allocation accounting (AllocationLedger)
 - error types
"""

from .errors import PrefixTrieError, InvalidArgument, AllocationError
from .allocation import AllocationLedger
from .trie import PrefixTrie, create, insert, autocomplete, destroy

__all__ = [
    "PrefixTrieError",
    "InvalidArgument",
    "AllocationError",
    "AllocationLedger",
    "PrefixTrie",
    "create",
    "insert",
    "autocomplete",
    "destroy",
]
