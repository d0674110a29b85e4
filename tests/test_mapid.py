import io

import pytest

from centrifuger.mapid import MapID


def test_add_assigns_dense_ids_in_order():
    m = MapID()
    assert m.add(562) == 0
    assert m.add(9606) == 1
    assert m.add(562) == 0
    assert len(m) == 2


def test_map_and_inverse_round_trip():
    m = MapID(["b", "a", "c"])
    for elem in ["a", "b", "c"]:
        assert m.inverse(m.map(elem)) == elem
    assert m.elements() == ["b", "a", "c"]


def test_contains():
    m = MapID([1, 2])
    assert 1 in m
    assert 3 not in m


def test_map_unknown_raises():
    m = MapID([1])
    with pytest.raises(KeyError):
        m.map(5)


def test_inverse_out_of_range_raises():
    m = MapID([1])
    with pytest.raises(IndexError):
        m.inverse(1)
    with pytest.raises(IndexError):
        m.inverse(-1)


def test_elements_is_a_copy():
    m = MapID([7])
    elems = m.elements()
    elems.append(8)
    assert m.elements() == [7]


def test_save_layout():
    m = MapID([1])
    buf = io.BytesIO()
    m.save(buf)
    assert buf.getvalue() == b"\x01" + b"\x00" * 7 + b"\x01" + b"\x00" * 7


def test_save_load_round_trip():
    m = MapID([2, 10, 9606, 2**63])
    buf = io.BytesIO()
    m.save(buf)
    buf.seek(0)
    loaded = MapID.load(buf)
    assert loaded.elements() == m.elements()
    for elem in m.elements():
        assert loaded.map(elem) == m.map(elem)


def test_save_load_empty():
    buf = io.BytesIO()
    MapID().save(buf)
    buf.seek(0)
    assert len(MapID.load(buf)) == 0


def test_load_truncated_raises():
    m = MapID([1, 2, 3])
    buf = io.BytesIO()
    m.save(buf)
    data = buf.getvalue()[:-4]
    with pytest.raises(ValueError):
        MapID.load(io.BytesIO(data))