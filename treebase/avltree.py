"""A self-balancing AVL tree mapping keys to values."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True)
class _Node:
    key: Any
    value: Any
    left: Optional["_Node"] = None
    right: Optional["_Node"] = None
    height: int = 1


def _height(node: Optional[_Node]) -> int:
    return node.height if node is not None else 0


def _refresh(node: _Node) -> None:
    node.height = 1 + max(_height(node.left), _height(node.right))


def _balance(node: _Node) -> int:
    return _height(node.right) - _height(node.left)


def _rotate_left(node: _Node) -> _Node:
    pivot = node.right
    assert pivot is not None
    node.right = pivot.left
    pivot.left = node
    _refresh(node)
    _refresh(pivot)
    return pivot


def _rotate_right(node: _Node) -> _Node:
    pivot = node.left
    assert pivot is not None
    node.left = pivot.right
    pivot.right = node
    _refresh(node)
    _refresh(pivot)
    return pivot


def _rebalance(node: _Node) -> _Node:
    _refresh(node)
    balance = _balance(node)
    if balance > 1:
        assert node.right is not None
        if _balance(node.right) < 0:
            node.right = _rotate_right(node.right)
        return _rotate_left(node)
    if balance < -1:
        assert node.left is not None
        if _balance(node.left) > 0:
            node.left = _rotate_left(node.left)
        return _rotate_right(node)
    return node


class AvlTree:
    """Balanced binary search tree.

    Keys equal to an existing key are placed in its right subtree, so
    duplicates are kept; ``find`` returns the first match met from the root.
    """

    def __init__(self) -> None:
        self._root: Optional[_Node] = None
        self._size = 0

    def insert(self, key: Any, value: Any) -> None:
        """Insert ``key`` with its associated ``value``."""
        self._root = self._insert(self._root, key, value)
        self._size += 1

    def _insert(self, node: Optional[_Node], key: Any, value: Any) -> _Node:
        if node is None:
            return _Node(key, value)
        if key >= node.key:
            node.right = self._insert(node.right, key, value)
        else:
            node.left = self._insert(node.left, key, value)
        return _rebalance(node)

    def find(self, key: Any) -> Any:
        """Return the value stored under ``key``, or None if it is absent."""
        node = self._root
        while node is not None:
            if key == node.key:
                return node.value
            node = node.right if key > node.key else node.left
        return None

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: Any) -> bool:
        node = self._root
        while node is not None:
            if key == node.key:
                return True
            node = node.right if key > node.key else node.left
        return False

    def keys(self) -> Iterator[Any]:
        """Yield the keys in ascending order."""
        stack: list[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.key
            node = node.right

    def height(self) -> int:
        """Return the number of levels in the tree (0 when empty)."""
        return _height(self._root)