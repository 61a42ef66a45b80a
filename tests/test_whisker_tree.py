import pytest

from remycc.memory import Memory, MemoryRange, max_memory, min_memory
from remycc.whisker import Whisker
from remycc.whisker_tree import WhiskerInsertError, WhiskerLookupError, WhiskerNode, WhiskerTree


def _uniform(value):
    return Memory(value, value, value, value)


def _negative_range(lo, hi):
    return MemoryRange(_uniform(lo), _uniform(hi))


def _full_range():
    return MemoryRange(min_memory(), max_memory())


def test_default_root_covers_all_memory():
    tree = WhiskerTree()
    root = tree.root.whisker
    assert root.generation == 0
    assert root.window_increment == 0
    assert root.window_multiple == 1.0
    assert root.intersend == 0.0
    assert tree.find_whisker(min_memory()) is root
    assert tree.find_whisker(max_memory()) is root


def test_insert_newer_generation_replaces_root():
    tree = WhiskerTree()
    newer = Whisker(1, 4, 1.0, 0.01, _full_range())
    tree.insert(newer)
    assert tree.root.whisker is newer
    assert tree.root.children == []
    assert tree.find_whisker(_uniform(1.0)) is newer


def test_insert_same_generation_raises():
    tree = WhiskerTree()
    with pytest.raises(WhiskerInsertError, match="generation 0 already exists"):
        tree.insert(Whisker(0, 1, 1.0, 0.0, _full_range()))


def test_insert_disjoint_domain_adds_child():
    tree = WhiskerTree()
    child = Whisker(0, 2, 1.0, 0.0, _negative_range(-10.0, -5.0))
    tree.insert(child)
    assert tree.root.children == [WhiskerNode(child)]
    assert tree.find_whisker(_uniform(-7.0)) is child
    assert tree.find_whisker(_uniform(3.0)) is tree.root.whisker


def test_insert_overlapping_child_replaces_it_or_raises():
    tree = WhiskerTree()
    tree.insert(Whisker(1, 2, 1.0, 0.0, _negative_range(-10.0, -5.0)))
    newer = Whisker(2, 3, 1.0, 0.0, _negative_range(-8.0, -6.0))
    tree.insert(newer)
    assert len(tree.root.children) == 1
    assert tree.root.children[0].whisker is newer
    with pytest.raises(WhiskerInsertError):
        tree.insert(Whisker(1, 9, 1.0, 0.0, _negative_range(-7.0, -6.5)))


def test_find_whisker_outside_every_domain_raises():
    tree = WhiskerTree()
    with pytest.raises(WhiskerLookupError, match="memory not found in the tree"):
        tree.find_whisker(_uniform(-1.0))


def test_str_indents_children():
    tree = WhiskerTree()
    child = Whisker(0, 2, 1.0, 0.0, _negative_range(-10.0, -5.0))
    tree.insert(child)
    lines = str(tree).splitlines()
    assert len(lines) == 2
    assert lines[0] == str(tree.root.whisker)
    assert lines[1] == "  " + str(child)
    assert str(tree).endswith("\n")