import math

import pytest

from centrifuger.difference_cover import DifferenceCover


@pytest.mark.parametrize("v", [14, 32, 64, 100, 256])
def test_is_a_difference_cover(v):
    dc = DifferenceCover(v)
    els = dc.elements
    assert {(b - a) % v for a in els for b in els} == set(range(v))


def test_small_period_is_raised_to_minimum():
    assert DifferenceCover(4).v == 14


def test_estimate_is_infinite_for_small_period():
    assert DifferenceCover.estimate_cover_size(13) == math.inf


@pytest.mark.parametrize("v", [14, 64, 4096])
def test_estimate_bounds_actual_size(v):
    assert DifferenceCover(v).m <= DifferenceCover.estimate_cover_size(v)


def test_elements_sorted_and_in_range():
    dc = DifferenceCover(64)
    els = dc.elements
    assert els == sorted(els)
    assert all(0 <= e < 64 for e in els)
    assert 0 in dc


@pytest.mark.parametrize("n", [0, 1, 13, 64, 100, 333])
def test_size_matches_cover_list(n):
    dc = DifferenceCover(32)
    positions = dc.cover_list(n)
    assert len(positions) == dc.size(n)
    assert all(p < n and p in dc for p in positions)


def test_compact_index_enumerates_cover_list():
    dc = DifferenceCover(32)
    positions = dc.cover_list(200)
    assert [dc.compact_index(p) for p in positions] == list(range(len(positions)))


def test_compact_index_rejects_uncovered():
    dc = DifferenceCover(32)
    missing = next(i for i in range(32) if i not in dc)
    with pytest.raises(ValueError):
        dc.compact_index(missing)


@pytest.mark.parametrize("v", [14, 64, 4096])
def test_delta_lands_both_in_cover(v):
    dc = DifferenceCover(v)
    for i, j in [(0, 1), (5, 17), (123, 9), (1000, 2001), (v - 1, 3 * v + 2)]:
        d = dc.delta(i, j)
        assert 0 <= d < v
        assert (i + d) in dc
        assert (j + d) in dc