from datetime import date

from programador.services.allocator import allocate
from programador.services.segments import Segment, segments_for, subtract_ranges

MONDAY = date(2025, 1, 6)


def assert_within_segments(allocation, segments):
    for block in allocation.blocks:
        assert any(seg.start <= block.start_minutes and block.end_minutes <= seg.end for seg in segments)
    for first, second in zip(allocation.blocks, allocation.blocks[1:]):
        assert first.end_minutes <= second.start_minutes


class TestAllocate:
    """Greedy placement of hours into day segments"""

    def test_full_monday(self):
        allocation = allocate(MONDAY, segments_for(1).segments, 10)
        assert [b.to_dict() for b in allocation.blocks] == [
            {"start": "2025-01-06T07:00:00", "end": "2025-01-06T09:00:00", "hours": 2.0},
            {"start": "2025-01-06T09:15:00", "end": "2025-01-06T12:00:00", "hours": 2.75},
            {"start": "2025-01-06T12:45:00", "end": "2025-01-06T18:00:00", "hours": 5.25},
        ]
        assert allocation.entry_time == "07:00"
        assert allocation.exit_time == "18:00"
        assert allocation.used_hours == 10

    def test_partial_day_stops_early(self):
        segments = segments_for(1).segments
        allocation = allocate(MONDAY, segments, 4)
        assert allocation.used_hours == 4
        assert allocation.exit_time == "11:15"
        assert_within_segments(allocation, segments)

    def test_conserves_hours_for_every_half_hour(self):
        segments = segments_for(6).segments
        for halves in range(1, 15):
            hours = halves / 2
            allocation = allocate(MONDAY, segments, hours)
            assert sum(b.hours for b in allocation.blocks) == hours
            assert allocation.used_hours == hours
            assert_within_segments(allocation, segments)

    def test_overflow_extends_last_block(self):
        allocation = allocate(MONDAY, segments_for(1).segments, 12)
        assert allocation.used_hours == 12
        assert allocation.exit_time == "20:00"
        assert sum(b.hours for b in allocation.blocks) == 12

    def test_zero_or_negative_hours_give_no_blocks(self):
        assert allocate(MONDAY, segments_for(1).segments, 0).blocks == []
        assert allocate(MONDAY, segments_for(1).segments, -2).entry_time is None

    def test_no_segments(self):
        assert allocate(MONDAY, [], 5).blocks == []

    def test_rounds_to_whole_minutes(self):
        allocation = allocate(MONDAY, [Segment(420, 600)], 1.0 / 3)
        assert allocation.blocks[0].end_minutes == 440

    def test_follows_gaps_left_by_study_windows(self):
        segments = subtract_ranges(segments_for(1).segments, [(600, 660)])
        allocation = allocate(MONDAY, segments, 9)
        assert allocation.used_hours == 9
        assert not any(b.start_minutes < 660 and b.end_minutes > 600 for b in allocation.blocks)
        assert allocation.exit_time == "18:00"
