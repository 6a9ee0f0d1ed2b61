"""
Prefix dictionary used to resolve abbreviated names.

A PrefixDict maps full names (sub-command names, long option names) to
payloads and answers lookups by any prefix of a name:

    >>> index = PrefixDict([("build", 1), ("bundle", 2)])
    >>> index.lookup("bui")
    Found(value=1)
    >>> index.lookup("bu")
    Ambiguous(candidates=('build', 'bundle'))
    >>> index.lookup("x")
    NotFound()

Rules
- an exact key always wins, even when longer keys share it as a prefix
  ("build" finds "build" when "builder" is also present).
- a prefix owned by exactly one key finds that key.
- a prefix owned by several keys is ambiguous; candidates come back sorted.
- adding an existing key replaces its payload.
"""
from typing import NamedTuple


class Found(NamedTuple):
    value: object


class Ambiguous(NamedTuple):
    candidates: tuple


class NotFound(NamedTuple):
    pass


class _Node:
    __slots__ = ("children", "key", "value", "keys")

    def __init__(self):
        self.children = {}
        self.key = None
        self.value = None
        # Every full key stored at or below this node.
        self.keys = set()


class PrefixDict:
    """
    Character trie keyed by name, answering prefix lookups.
    """

    def __init__(self, items=(), /):
        self._root = _Node()
        for name, value in items:
            self.add(name, value)

    def add(self, name, value, /):
        if not isinstance(name, str):
            raise TypeError("PrefixDict keys must be strings")
        node = self._root
        node.keys.add(name)
        for char in name:
            node = node.children.setdefault(char, _Node())
            node.keys.add(name)
        node.key = name
        node.value = value
        return self

    def _walk(self, prefix):
        node = self._root
        for char in prefix:
            try:
                node = node.children[char]
            except KeyError:
                return None
        return node

    def lookup(self, token, /):
        node = self._walk(token)
        if node is None or not node.keys:
            return NotFound()
        if node.key is not None:
            return Found(node.value)
        if len(node.keys) == 1:
            key, = node.keys
            return Found(self._walk(key).value)
        return Ambiguous(tuple(sorted(node.keys)))

    def ambiguities(self, prefix, /):
        """
        every key starting with prefix, sorted.
        """
        node = self._walk(prefix)
        return sorted(node.keys) if node is not None else []

    def __contains__(self, name):
        node = self._walk(name) if isinstance(name, str) else None
        return node is not None and node.key == name

    def __len__(self):
        return len(self._root.keys)

    def __iter__(self):
        return iter(sorted(self._root.keys))

    def __repr__(self):
        return f"PrefixDict({list(self)!r})"


__all__ = (
    "PrefixDict",
    "Found",
    "Ambiguous",
    "NotFound",
)
