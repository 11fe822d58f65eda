# trie.py
# Frequency-ranked prefix trie for autocompletion.
# Every node is a fixed 256-slot table indexed by character code, each slot
# (Entry) can end a stored word (with an insertion counter) and/or lead to a
# child node. autocomplete() walks the prefix and returns the most frequently
# inserted word below it, ties going to the smallest word by byte value.

from __future__ import annotations

import sys
from typing import Iterator, List, Optional, TextIO, Tuple

from prefix_autocompleter.utils.logger_utils import Log, default_log

from .allocation import AllocationLedger
from .errors import AllocationError, InvalidArgument

ALPHABET_SIZE = 256
MIN_CHAR = 32  # control characters below this are rejected on insert


class Entry:
    """
    One character slot inside a Node.
    word: the stored string ending exactly here (None if nothing ends here)
    frequency: how many times `word` was inserted, 0 iff word is None
    child: Node reached by consuming this character
    """

    __slots__ = ("word", "frequency", "child")

    def __init__(self) -> None:
        self.word: Optional[str] = None
        self.frequency = 0
        self.child: Optional[Node] = None


class Node:
    """Fixed table of ALPHABET_SIZE slots, entries are created lazily on insert."""

    __slots__ = ("entries",)

    def __init__(self) -> None:
        self.entries: List[Optional[Entry]] = [None] * ALPHABET_SIZE


def _slot(node: Node, ch: str) -> Optional[Entry]:
    code = ord(ch)
    if code >= ALPHABET_SIZE:
        return None
    return node.entries[code]


def _preorder(node: Node) -> Iterator[Entry]:
    """
    Yield every entry below `node` depth-first, in byte order.
    An entry comes before everything in its child subtree, and the subtree
    before the next sibling slot, so stored words come out sorted.
    Explicit stack, long words must not hit the recursion limit.
    """
    stack = [iter(node.entries)]
    while stack:
        for entry in stack[-1]:
            if entry is None:
                continue
            yield entry
            if entry.child is not None:
                stack.append(iter(entry.child.entries))
                break
        else:
            stack.pop()


def _check_word(word) -> str:
    if word is None:
        raise InvalidArgument("word is None")
    if not isinstance(word, str):
        raise InvalidArgument(f"word must be str, not {type(word).__name__}")
    if not word:
        raise InvalidArgument("word is empty")
    for i, ch in enumerate(word):
        code = ord(ch)
        if code < MIN_CHAR or code >= ALPHABET_SIZE:
            raise InvalidArgument(f"invalid character {ch!r} (code {code}) at index {i}")
    return word


class PrefixTrie:
    """
    The store: owns the root node and an allocation ledger.
    Use create()/destroy() or a `with` block; a destroyed store rejects every
    operation with InvalidArgument.
    """

    def __init__(self, max_nodes: int = 0, log: Optional[Log] = None) -> None:
        self.log = log or default_log
        self._ledger = AllocationLedger(max_nodes)
        self._destroyed = False
        self._root: Optional[Node] = self._new_node()
        self.log.info(f"trie created (max_nodes={max_nodes or 'unbounded'})")

    @classmethod
    def from_config(cls, cfg, log: Optional[Log] = None) -> "PrefixTrie":
        return cls(max_nodes=cfg.get("max_nodes"), log=log)

    def __enter__(self) -> "PrefixTrie":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.destroy()

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def _alive(self) -> Node:
        if self._destroyed or self._root is None:
            raise InvalidArgument("store has been destroyed")
        return self._root

    def _new_node(self) -> Node:
        try:
            node = Node()
        except MemoryError as e:
            raise AllocationError("out of memory allocating trie node") from e
        self._ledger.acquire_node()
        return node

    # insertion -----------------------------------------------------
    def insert(self, word: str) -> None:
        """
        Record one more insertion of `word`.
        The whole word is validated before anything is touched. Path nodes
        are created as needed; if one cannot be, AllocationError is raised and
        the nodes already added stay in place (the word itself is not counted).
        """
        node = self._alive()
        word = _check_word(word)

        try:
            for ch in word[:-1]:
                code = ord(ch)
                entry = node.entries[code]
                if entry is None or entry.child is None:
                    child = self._new_node()
                    if entry is None:
                        entry = node.entries[code] = Entry()
                    entry.child = child
                node = entry.child
        except AllocationError as e:
            self.log.warning(f"insert {word!r} failed: {e}")
            raise

        code = ord(word[-1])
        entry = node.entries[code]
        if entry is None:
            entry = node.entries[code] = Entry()
        if entry.word is None:
            # strings are immutable, one stored copy is reused on re-insertion
            self._ledger.acquire_word()
            entry.word = word
        entry.frequency += 1
        self.log.debug(f"insert {word!r} -> freq {entry.frequency}")

    # lookup --------------------------------------------------------
    def autocomplete(self, prefix: str) -> str:
        """
        Most frequently inserted word starting with `prefix`.
        Equal frequencies go to the smallest word by byte value.
        Returns `prefix` itself when nothing stored starts with it.
        """
        node: Optional[Node] = self._alive()
        if not isinstance(prefix, str):
            raise InvalidArgument(f"prefix must be str, not {type(prefix).__name__}")

        best: Optional[Entry] = None
        last = len(prefix) - 1
        for i, ch in enumerate(prefix):
            entry = _slot(node, ch)
            if entry is None:
                return prefix
            if i == last:
                # prefix names a stored word exactly: it competes too
                if entry.frequency > 0:
                    best = entry
                node = entry.child
            else:
                node = entry.child
                if node is None:
                    return prefix

        if node is not None:
            for entry in _preorder(node):
                if entry.frequency > 0 and (best is None or entry.frequency > best.frequency):
                    best = entry

        if best is None:
            return prefix
        return best.word

    def frequency(self, word: str) -> int:
        """Insertion count of exactly `word` (0 if never inserted)."""
        node: Optional[Node] = self._alive()
        if not isinstance(word, str) or not word:
            return 0
        entry = None
        for ch in word:
            if node is None:
                return 0
            entry = _slot(node, ch)
            if entry is None:
                return 0
            node = entry.child
        return entry.frequency

    # convenience/debugging -----------------------------------------
    def dump_rows(self) -> Iterator[Tuple[str, int]]:
        """(word, frequency) for every stored word, pre-order byte order."""
        root = self._alive()
        for entry in _preorder(root):
            if entry.frequency > 0:
                yield entry.word, entry.frequency

    def dump(self, stream: Optional[TextIO] = None) -> int:
        """
        Pre-order dump: one `word<TAB>frequency` line per stored word, byte order.
        Returns the number of lines written.
        """
        self._alive()
        out = stream or sys.stdout
        n = 0
        for word, freq in self.dump_rows():
            out.write(f"{word}\t{freq}\n")
            n += 1
        return n

    def stats(self) -> dict:
        return self._ledger.snapshot()

    # lifecycle -----------------------------------------------------
    def destroy(self) -> None:
        """
        Release every node and stored word, children before their parent.
        A second call is a no-op.
        """
        if self._destroyed:
            return

        order: List[Node] = []
        stack = [self._root]
        while stack:
            node = stack.pop()
            order.append(node)
            for entry in node.entries:
                if entry is not None and entry.child is not None:
                    stack.append(entry.child)

        # reversed pre-order: every node comes after all of its descendants
        for node in reversed(order):
            for i, entry in enumerate(node.entries):
                if entry is None:
                    continue
                if entry.word is not None:
                    entry.word = None
                    entry.frequency = 0
                    self._ledger.release_word()
                entry.child = None
                node.entries[i] = None
            self._ledger.release_node()

        self._root = None
        self._destroyed = True
        self.log.info(f"trie destroyed ({self._ledger.nodes_released} nodes, {self._ledger.words_released} words released)")


# Functional surface --------------------------------------------------------

def create(config=None, log: Optional[Log] = None) -> PrefixTrie:
    """New empty store, sized from `config` (a Config) when given."""
    if config is not None:
        return PrefixTrie.from_config(config, log=log)
    return PrefixTrie(log=log)


def insert(store: Optional[PrefixTrie], word: str) -> None:
    if store is None:
        raise InvalidArgument("store is None")
    store.insert(word)


def autocomplete(store: Optional[PrefixTrie], prefix: str) -> str:
    if store is None:
        raise InvalidArgument("store is None")
    return store.autocomplete(prefix)


def destroy(store: Optional[PrefixTrie]) -> None:
    """Safe on None and on an already destroyed store."""
    if store is None:
        return
    store.destroy()
