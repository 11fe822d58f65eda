# errors.py - exception types raised by the prefix trie

class PrefixTrieError(Exception):
    """Base class for everything the trie raises."""


class InvalidArgument(PrefixTrieError, ValueError):
    """
    Bad handle or bad string:
     - store is None or already destroyed
     - word is None, not a str, or empty
     - word holds a character outside the accepted byte range (code < 32 or > 255)
    """


class AllocationError(PrefixTrieError, MemoryError):
    """A node or stored word could not be obtained (memory exhausted or node budget hit)."""
