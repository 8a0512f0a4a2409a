import random

import pytest

from treebase.btree import BTree, Entry


def _check_structure(tree):
    """Verify leaf depth, node sizes, parent links and entry back-links."""
    root = tree._root
    if root is None:
        return
    depths = set()

    def walk(node, depth):
        assert node.entries or node is root
        if node is not root:
            assert len(node.entries) >= tree._min
        assert len(node.entries) < tree._max
        for entry in node.entries:
            assert entry._node is node
        if node.children:
            assert len(node.children) == len(node.entries) + 1
            for child in node.children:
                assert child.parent is node
                walk(child, depth + 1)
        else:
            depths.add(depth)

    assert root.parent is None
    walk(root, 0)
    assert len(depths) == 1


def test_empty_tree():
    tree = BTree()
    assert tree.is_empty()
    assert tree.values() == []
    assert tree.find(5) is None
    assert tree.scan_ascending(5, "<") == []
    assert tree.scan_descending(5, ">") == []


def test_small_degree_rejected():
    with pytest.raises(ValueError):
        BTree(2)


def test_find_min_max_on_empty_raise():
    tree = BTree()
    with pytest.raises(ValueError):
        tree.find_min()
    with pytest.raises(ValueError):
        tree.find_max()


def test_insert_returns_entry_and_find():
    tree = BTree()
    entry = tree.insert(42)
    assert isinstance(entry, Entry)
    assert entry.value == 42
    assert tree.find(42) is entry
    assert not tree.is_empty()


@pytest.mark.parametrize("degree", [3, 4, 5, 7])
def test_random_inserts_keep_order(degree):
    rng = random.Random(degree)
    data = [rng.randrange(50) for _ in range(300)]
    tree = BTree(degree)
    for value in data:
        tree.insert(value)
        _check_structure(tree)
    assert tree.values() == sorted(data)
    assert tree.find_min().value == min(data)
    assert tree.find_max().value == max(data)
    for value in set(data):
        assert tree.find(value).value == value
    assert tree.find(1000) is None


@pytest.mark.parametrize("degree", [3, 4, 6])
def test_random_deletes_keep_order(degree):
    rng = random.Random(100 + degree)
    data = [rng.randrange(40) for _ in range(200)]
    tree = BTree(degree)
    for value in data:
        tree.insert(value)
    remaining = list(data)
    rng.shuffle(remaining)
    while remaining:
        value = remaining.pop()
        tree.delete(value)
        _check_structure(tree)
        assert tree.values() == sorted(remaining)
    assert tree.is_empty()


def test_delete_entry_by_identity_among_duplicates():
    tree = BTree()
    first = tree.insert(7)
    second = tree.insert(7)
    for value in range(20):
        tree.insert(value)
    tree.delete_entry(second)
    _check_structure(tree)
    assert tree.scan_ascending(7, "==") != []
    assert any(entry is first for entry in tree.scan_ascending(7, "=="))
    assert all(entry is not second for entry in tree.scan_ascending(7, "=="))


def test_delete_missing_value_raises():
    tree = BTree()
    tree.insert(1)
    with pytest.raises(KeyError):
        tree.delete(2)


def test_delete_entry_twice_raises():
    tree = BTree()
    entry = tree.insert(3)
    tree.insert(4)
    tree.delete_entry(entry)
    with pytest.raises(ValueError):
        tree.delete_entry(entry)


def test_delete_foreign_entry_raises():
    one, other = BTree(), BTree()
    one.insert(1)
    foreign = other.insert(1)
    with pytest.raises(ValueError):
        one.delete_entry(foreign)
    assert one.values() == [1]


def test_delete_returns_next_link():
    tree = BTree()
    partner = BTree().insert(99)
    entry = tree.insert(5)
    entry.next = partner
    for value in range(10):
        tree.insert(value)
    assert tree.delete_entry(entry) is partner
    assert tree.delete(9) is None


def test_update_keeps_link_and_moves_value():
    tree = BTree()
    partner = BTree().insert(0)
    for value in range(15):
        entry = tree.insert(value)
        if value == 8:
            entry.next = partner
    replacement = tree.update(8, 100)
    assert replacement.value == 100
    assert replacement.next is partner
    assert tree.find(8) is None
    assert tree.find_max() is replacement
    _check_structure(tree)


def test_update_entry_and_missing_update():
    tree = BTree()
    entry = tree.insert(10)
    replacement = tree.update_entry(entry, 20)
    assert tree.values() == [20]
    assert tree.find(20) is replacement
    with pytest.raises(KeyError):
        tree.update(10, 30)


def test_scan_ascending_equal_collects_all_duplicates():
    tree = BTree()
    data = [5, 1, 5, 3, 5, 9, 2, 5, 8]
    for value in data:
        tree.insert(value)
    found = tree.scan_ascending(5, "==")
    assert [entry.value for entry in found] == [5, 5, 5, 5]
    assert len({id(entry) for entry in found}) == 4


def test_scan_ascending_less_than():
    tree = BTree(4)
    data = list(range(30))
    random.Random(1).shuffle(data)
    for value in data:
        tree.insert(value)
    found = [entry.value for entry in tree.scan_ascending(12, "<")]
    assert found == list(range(12))


def test_scan_descending_greater_than():
    tree = BTree()
    data = list(range(30))
    random.Random(2).shuffle(data)
    for value in data:
        tree.insert(value)
    found = [entry.value for entry in tree.scan_descending(24, ">")]
    assert found == [29, 28, 27, 26, 25]


@pytest.mark.parametrize("compare", [">", "<=", "!="])
def test_scan_ascending_rejects_other_comparisons(compare):
    tree = BTree()
    tree.insert(1)
    with pytest.raises(ValueError):
        tree.scan_ascending(1, compare)


@pytest.mark.parametrize("compare", ["<", "==", ">="])
def test_scan_descending_rejects_other_comparisons(compare):
    tree = BTree()
    tree.insert(1)
    with pytest.raises(ValueError):
        tree.scan_descending(1, compare)


def test_entry_links_survive_rebalancing():
    tree = BTree()
    entries = [tree.insert(value) for value in range(40)]
    for current, following in zip(entries, entries[1:]):
        current.next = following
    for value in range(0, 40, 3):
        tree.delete(value)
    for entry in tree.scan_ascending(1000, "<"):
        assert entry.next is None or entry.next.value == entry.value + 1
    _check_structure(tree)