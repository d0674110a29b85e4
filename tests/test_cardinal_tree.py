import io

import pytest

from centrifuger.cardinal_tree import CardinalTree


@pytest.fixture
def tree():
    t = CardinalTree(4)
    t.add_node(0, 1)   # node 1
    t.add_node(0, 3)   # node 2
    t.add_node(1, 0)   # node 3
    return t


def test_add_node_ids(tree):
    assert len(tree) == 4
    assert tree.add_node(2, 2) == 4


def test_children(tree):
    assert tree.first_child(0) == 1
    assert tree.last_child(0) == 2
    assert tree.children_count(0) == 2
    assert tree.child_select(0, 2) == 2
    assert tree.child_select(0, 3) == 0
    assert tree.first_child(3) == 0


def test_ranks_and_siblings(tree):
    assert tree.child_rank(0) == 0
    assert tree.child_rank(2) == 2
    assert tree.next_sibling(1) == 2
    assert tree.next_sibling(2) == 0
    assert tree.prev_sibling(2) == 1
    assert tree.prev_sibling(1) == 0


def test_parent_and_leaf(tree):
    assert tree.parent(3) == 1
    assert tree.is_leaf(3)
    assert not tree.is_leaf(0)


def test_labels(tree):
    assert tree.children_labeled(0, 1) == 1
    assert tree.children_labeled(0, 2) == 0
    assert tree.labeled_child(0, 3) == 2
    assert tree.child_label(2) == 3


def test_parent_child_invariant(tree):
    for v in range(1, len(tree)):
        assert tree.labeled_child(tree.parent(v), tree.child_label(v)) == v


def test_bad_label_raises(tree):
    with pytest.raises(ValueError):
        tree.add_node(0, 4)


def test_save_load_round_trip(tree):
    buf = io.BytesIO()
    tree.save(buf)
    buf.seek(0)
    loaded = CardinalTree.load(buf)
    assert len(loaded) == len(tree)
    assert loaded.cardinality == tree.cardinality
    for v in range(len(tree)):
        assert loaded.parent(v) == tree.parent(v)
        assert loaded.child_label(v) == tree.child_label(v)
        assert loaded.children_count(v) == tree.children_count(v)


def test_truncated_load_raises():
    with pytest.raises(ValueError):
        CardinalTree.load(io.BytesIO(b"\x01\x00"))