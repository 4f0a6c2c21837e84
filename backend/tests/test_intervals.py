from slotwise.services.intervals import Interval, overlaps, overlaps_any

from conftest import at


def test_overlapping_ranges():
    assert overlaps(Interval(at(9), at(10)), Interval(at(9, 30), at(11)))
    assert overlaps(Interval(at(9, 30), at(11)), Interval(at(9), at(10)))


def test_containment_overlaps():
    assert overlaps(Interval(at(9), at(12)), Interval(at(10), at(10, 15)))
    assert overlaps(Interval(at(10), at(10, 15)), Interval(at(9), at(12)))


def test_touching_ranges_do_not_overlap():
    assert not overlaps(Interval(at(9), at(10)), Interval(at(10), at(11)))
    assert not overlaps(Interval(at(10), at(11)), Interval(at(9), at(10)))


def test_disjoint_ranges():
    assert not overlaps(Interval(at(9), at(10)), Interval(at(14), at(15)))


def test_overlaps_any():
    span = Interval(at(10), at(10, 45))
    assert not overlaps_any(span, [])
    assert not overlaps_any(span, [Interval(at(9), at(10)), Interval(at(10, 45), at(11))])
    assert overlaps_any(span, [Interval(at(9), at(10)), Interval(at(10, 30), at(11))])
