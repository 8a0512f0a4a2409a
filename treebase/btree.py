"""A B-tree of integer values whose entries can be linked into rows."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from operator import attrgetter
from typing import Iterator, Optional

_value_of = attrgetter("value")


@dataclass(eq=False)
class Entry:
    """One stored value.

    ``next`` links the entry to the entry of the following column of the
    same row, so a row forms a ring of entries across several trees.
    """

    value: int
    next: Optional["Entry"] = None
    _node: Optional["_BNode"] = field(default=None, repr=False, compare=False)


class _BNode:
    __slots__ = ("entries", "children", "parent")

    def __init__(
        self,
        entries: list[Entry],
        children: list["_BNode"],
        parent: Optional["_BNode"] = None,
    ) -> None:
        self.entries = entries
        self.children = children
        self.parent = parent


def _child_index(parent: _BNode, child: _BNode) -> int:
    return next(i for i, node in enumerate(parent.children) if node is child)


class BTree:
    """B-tree holding integer values, duplicates allowed.

    A node is split once it holds ``max_degree`` entries and is refilled
    when it drops below ``(max_degree - 1) // 2`` entries.
    """

    def __init__(self, max_degree: int = 3) -> None:
        if max_degree < 3:
            raise ValueError("max_degree must be at least 3")
        self._max = max_degree
        self._min = (max_degree - 1) // 2
        self._root: Optional[_BNode] = None

    def is_empty(self) -> bool:
        """Return True when the tree holds no entries."""
        return self._root is None or not self._root.entries

    # -- lookup -----------------------------------------------------------

    def find(self, value: int) -> Optional[Entry]:
        """Return an entry holding ``value``, or None if there is none."""
        node = self._root
        while node is not None:
            i = bisect_left(node.entries, value, key=_value_of)
            if i < len(node.entries) and node.entries[i].value == value:
                return node.entries[i]
            node = node.children[i] if node.children else None
        return None

    def find_min(self) -> Entry:
        """Return the entry with the smallest value."""
        if self.is_empty():
            raise ValueError("the tree is empty")
        node = self._root
        assert node is not None
        while node.children:
            node = node.children[0]
        return node.entries[0]

    def find_max(self) -> Entry:
        """Return the entry with the largest value."""
        if self.is_empty():
            raise ValueError("the tree is empty")
        node = self._root
        assert node is not None
        while node.children:
            node = node.children[-1]
        return node.entries[-1]

    # -- insertion --------------------------------------------------------

    def insert(self, value: int) -> Entry:
        """Store ``value`` and return the new entry."""
        entry = Entry(value)
        if self._root is None:
            self._root = _BNode([entry], [])
            entry._node = self._root
            return entry
        node = self._root
        while node.children:
            node = node.children[bisect_left(node.entries, value, key=_value_of)]
        node.entries.insert(bisect_right(node.entries, value, key=_value_of), entry)
        entry._node = node
        self._split(node)
        return entry

    def _split(self, node: _BNode) -> None:
        while len(node.entries) >= self._max:
            mid = (self._max - 1) // 2
            median = node.entries[mid]
            right = _BNode(node.entries[mid + 1:], node.children[mid + 1:])
            node.entries = node.entries[:mid]
            node.children = node.children[: mid + 1] if node.children else []
            for entry in right.entries:
                entry._node = right
            for child in right.children:
                child.parent = right
            parent = node.parent
            if parent is None:
                parent = _BNode([median], [node, right])
                self._root = parent
                node.parent = parent
            else:
                i = _child_index(parent, node)
                parent.entries.insert(i, median)
                parent.children.insert(i + 1, right)
            right.parent = parent
            median._node = parent
            node = parent

    # -- deletion ---------------------------------------------------------

    def delete(self, value: int) -> Optional[Entry]:
        """Remove an entry holding ``value`` and return its ``next`` link."""
        entry = self.find(value)
        if entry is None:
            raise KeyError(value)
        return self.delete_entry(entry)

    def delete_entry(self, entry: Entry) -> Optional[Entry]:
        """Remove this very entry and return its ``next`` link."""
        node = entry._node
        if node is None or not self._owns(node):
            raise ValueError("entry is not stored in this tree")
        index = next(
            (i for i, item in enumerate(node.entries) if item is entry), None
        )
        if index is None:
            raise ValueError("entry is not stored in this tree")
        following = entry.next
        if node.children:
            leaf = node.children[index]
            while leaf.children:
                leaf = leaf.children[-1]
            predecessor = leaf.entries.pop()
            node.entries[index] = predecessor
            predecessor._node = node
            node = leaf
        else:
            node.entries.pop(index)
        entry._node = None
        self._fix_underflow(node)
        return following

    def _owns(self, node: _BNode) -> bool:
        while node.parent is not None:
            node = node.parent
        return node is self._root

    def _fix_underflow(self, node: _BNode) -> None:
        while True:
            parent = node.parent
            if parent is None:
                if not node.entries:
                    if node.children:
                        self._root = node.children[0]
                        self._root.parent = None
                    else:
                        self._root = None
                return
            if len(node.entries) >= self._min:
                return
            i = _child_index(parent, node)
            left = parent.children[i - 1] if i > 0 else None
            right = parent.children[i + 1] if i + 1 < len(parent.children) else None
            if left is not None and len(left.entries) > self._min:
                separator = parent.entries[i - 1]
                node.entries.insert(0, separator)
                separator._node = node
                lifted = left.entries.pop()
                parent.entries[i - 1] = lifted
                lifted._node = parent
                if left.children:
                    child = left.children.pop()
                    node.children.insert(0, child)
                    child.parent = node
                return
            if right is not None and len(right.entries) > self._min:
                separator = parent.entries[i]
                node.entries.append(separator)
                separator._node = node
                lifted = right.entries.pop(0)
                parent.entries[i] = lifted
                lifted._node = parent
                if right.children:
                    child = right.children.pop(0)
                    node.children.append(child)
                    child.parent = node
                return
            self._merge(parent, i - 1 if left is not None else i)
            node = parent

    @staticmethod
    def _merge(parent: _BNode, i: int) -> None:
        left = parent.children[i]
        right = parent.children.pop(i + 1)
        separator = parent.entries.pop(i)
        moved = [separator, *right.entries]
        for entry in moved:
            entry._node = left
        left.entries.extend(moved)
        for child in right.children:
            child.parent = left
        left.children.extend(right.children)

    # -- update -----------------------------------------------------------

    def update(self, old: int, new: int) -> Entry:
        """Replace an entry holding ``old`` with one holding ``new``."""
        entry = self.find(old)
        if entry is None:
            raise KeyError(old)
        return self.update_entry(entry, new)

    def update_entry(self, entry: Entry, new: int) -> Entry:
        """Replace ``entry`` with a new entry for ``new`` keeping its link."""
        following = self.delete_entry(entry)
        replacement = self.insert(new)
        replacement.next = following
        return replacement

    # -- scanning ---------------------------------------------------------

    def _ascending(self, node: Optional[_BNode]) -> Iterator[Entry]:
        if node is None:
            return
        if not node.children:
            yield from node.entries
            return
        for child, entry in zip(node.children, node.entries):
            yield from self._ascending(child)
            yield entry
        yield from self._ascending(node.children[-1])

    def _descending(self, node: Optional[_BNode]) -> Iterator[Entry]:
        if node is None:
            return
        if not node.children:
            yield from reversed(node.entries)
            return
        yield from self._descending(node.children[-1])
        for child, entry in zip(reversed(node.children[:-1]), reversed(node.entries)):
            yield entry
            yield from self._descending(child)

    def scan_ascending(self, value: int, compare: str) -> list[Entry]:
        """Return entries ``== value`` or ``< value`` in ascending order."""
        if compare not in ("==", "<"):
            raise ValueError(f"unsupported comparison {compare!r}")
        result: list[Entry] = []
        for entry in self._ascending(self._root):
            if compare == "<":
                if entry.value >= value:
                    break
                result.append(entry)
            elif entry.value == value:
                result.append(entry)
            elif entry.value > value:
                break
        return result

    def scan_descending(self, value: int, compare: str) -> list[Entry]:
        """Return entries ``> value`` in descending order."""
        if compare != ">":
            raise ValueError(f"unsupported comparison {compare!r}")
        result: list[Entry] = []
        for entry in self._descending(self._root):
            if entry.value <= value:
                break
            result.append(entry)
        return result

    def values(self) -> list[int]:
        """Return every stored value in ascending order."""
        return [entry.value for entry in self._ascending(self._root)]