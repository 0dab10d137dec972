"""
Semantic test: Shortest-fit selection.

Invariant:
Among vacant segments whose available part (clipped to the search range, if
any) can hold the request, the one with the smallest available part is cut.
Ties go to the earliest segment.
"""

from __future__ import annotations

from timeled.core.domain.interval import Interval
from timeled.core.domain.segment import Segment, SegmentStatus
from timeled.core.domain.timeline import Timeline


def make_timeline_with_gaps() -> Timeline:
    """Segments: [0,10) V, [10,20) O, [20,30) V, [30,90) O, [90,100) V."""
    timeline = Timeline(0, 100)
    timeline.occupy_segment(10, Interval(10, 20))
    timeline.occupy_segment(60, Interval(30, 90))
    return timeline


def test_smallest_sufficient_segment_wins() -> None:
    timeline = Timeline(0, 100)
    timeline.occupy_segment(10, Interval(20, 30))

    segment = timeline.get_and_cut_segment(15)

    # [0,20) holds 20 units; [30,100) holds 70.
    assert segment == Segment(0, 15)


def test_too_small_segments_are_skipped() -> None:
    timeline = Timeline(0, 100)
    timeline.occupy_segment(10, Interval(20, 30))

    segment = timeline.get_and_cut_segment(25)

    assert segment == Segment(30, 55)


def test_tie_goes_to_earliest_segment() -> None:
    timeline = make_timeline_with_gaps()
    assert [s.duration() for s in timeline.segments if s.is_vacant] == [10, 10, 10]

    first = timeline.get_and_cut_segment(10)
    second = timeline.get_and_cut_segment(5)

    assert first == Segment(0, 10)
    # [0,10) is now an exact fit of 10; the 5-unit request still ties with
    # [20,30) and [90,100), so the earliest one is chosen.
    assert second == Segment(0, 5)


def test_fit_is_measured_inside_search_range() -> None:
    timeline = Timeline(0, 100)
    timeline.occupy_segment(10, Interval(40, 50))

    # Inside [35, 60]: [35,40) offers 5, [50,60) offers 10.
    segment = timeline.get_and_cut_segment(5, Interval(35, 60))

    assert segment == Segment(35, 40)
    assert timeline.segments[:2] == (Segment(0, 35), Segment(35, 40))


def test_insufficient_part_inside_range_is_skipped() -> None:
    timeline = Timeline(0, 100)
    timeline.occupy_segment(10, Interval(40, 50))

    # Inside [25, 60]: [25,40) offers 15, [50,60) offers only 10.
    segment = timeline.get_and_cut_segment(12, Interval(25, 60))

    assert segment == Segment(25, 37)


def test_occupied_segments_are_never_candidates() -> None:
    timeline = make_timeline_with_gaps()

    segment = timeline.get_and_cut_segment(10, Interval(10, 30))

    assert segment == Segment(20, 30)
    assert timeline.segments[1] == Segment(10, 20, SegmentStatus.OCCUPIED)
