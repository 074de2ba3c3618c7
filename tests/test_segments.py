import pytest

from programador.core.dates import hm_to_minutes, minutes_to_hm
from programador.services.segments import (
    HolidayDecision,
    ReductionStyle,
    Segment,
    default_capacity,
    legal_cap,
    overlap_minutes,
    overtime_cap,
    payable_extra_cap,
    reduced_capacity,
    regular_cap,
    segments_for,
    subtract_ranges,
)


def spans(info):
    return [(minutes_to_hm(s.start), minutes_to_hm(s.end)) for s in info.segments]


class TestSegmentLayouts:
    """Day layouts per weekday / holiday / reduction"""

    @pytest.mark.parametrize("weekday", [1, 2, 3, 4, 5, 6, 7])
    @pytest.mark.parametrize("is_reduced", [False, True])
    @pytest.mark.parametrize("style", [ReductionStyle.LEAVE_EARLY, ReductionStyle.ARRIVE_LATE])
    def test_segment_minutes_match_capacity(self, weekday, is_reduced, style):
        info = segments_for(weekday, is_reduced=is_reduced, reduction_style=style)
        assert info.segment_minutes == info.capacity_hours * 60

    def test_worked_holiday_capacity_matches_segments(self):
        info = segments_for(3, is_holiday=True, holiday_decision=HolidayDecision.WORK)
        assert info.capacity_hours == 6
        assert info.segment_minutes == 360
        assert spans(info) == [("07:00", "13:00")]
        assert [(b.start, b.duration) for b in info.breaks] == [(hm_to_minutes("09:00"), 15)]

    def test_monday_regular_day(self):
        info = segments_for(1)
        assert info.capacity_hours == 10
        assert spans(info) == [("07:00", "09:00"), ("09:15", "12:00"), ("12:45", "18:00")]
        assert [b.duration for b in info.breaks] == [15, 45]

    def test_saturday_regular_day(self):
        info = segments_for(6)
        assert info.capacity_hours == 7
        assert spans(info) == [("07:00", "09:00"), ("09:15", "12:00"), ("12:45", "15:00")]

    def test_weekday_reduced_leave_early(self):
        info = segments_for(2, is_reduced=True, reduction_style="salir-temprano")
        assert info.capacity_hours == 9
        assert spans(info)[-1] == ("12:45", "17:00")

    def test_weekday_reduced_arrive_late(self):
        info = segments_for(2, is_reduced=True, reduction_style="entrar-tarde")
        assert info.capacity_hours == 9
        assert spans(info)[0] == ("08:00", "09:00")
        assert spans(info)[-1] == ("12:45", "18:00")

    def test_saturday_reduced_styles(self):
        early = segments_for(6, is_reduced=True, reduction_style=ReductionStyle.LEAVE_EARLY)
        late = segments_for(6, is_reduced=True, reduction_style=ReductionStyle.ARRIVE_LATE)
        assert early.capacity_hours == late.capacity_hours == 6
        assert spans(early)[-1] == ("12:45", "14:00")
        assert spans(late)[0] == ("08:00", "09:00")
        assert spans(late)[-1] == ("12:45", "15:00")

    def test_reduced_day_defaults_to_leave_early(self):
        assert spans(segments_for(4, is_reduced=True))[-1] == ("12:45", "17:00")

    def test_sunday_ignores_every_flag(self):
        info = segments_for(7, is_holiday=True, holiday_decision="work", is_reduced=True)
        assert info.capacity_hours == 0
        assert info.segments == ()

    def test_skipped_holiday_uses_regular_layout(self):
        info = segments_for(1, is_holiday=True, holiday_decision=HolidayDecision.SKIP)
        assert info.capacity_hours == 10


class TestCaps:
    """Daily hour ceilings"""

    def test_weekday_caps(self):
        assert (legal_cap(1), regular_cap(1), payable_extra_cap(1), overtime_cap(1)) == (8, 10, 2, 14)

    def test_saturday_caps(self):
        assert (legal_cap(6), regular_cap(6), payable_extra_cap(6), overtime_cap(6)) == (4, 7, 3, 11)

    def test_sunday_caps(self):
        assert (legal_cap(7), regular_cap(7), payable_extra_cap(7), overtime_cap(7)) == (0, 0, 0, 0)

    def test_reduced_and_default_capacity(self):
        assert reduced_capacity(5) == 9
        assert reduced_capacity(6) == 6
        assert default_capacity(5) == 10
        assert default_capacity(5, is_holiday=True, holiday_decision="work") == 6
        assert default_capacity(5, is_holiday=True, holiday_decision="skip") == 10


class TestSubtractRanges:
    """Cutting study windows out of a day"""

    def setup_method(self):
        self.monday = list(segments_for(1).segments)

    def test_window_inside_segment_splits_it(self):
        result = subtract_ranges(self.monday, [(hm_to_minutes("14:00"), hm_to_minutes("16:00"))])
        assert [(minutes_to_hm(s.start), minutes_to_hm(s.end)) for s in result] == [
            ("07:00", "09:00"),
            ("09:15", "12:00"),
            ("12:45", "14:00"),
            ("16:00", "18:00"),
        ]

    def test_window_over_edge_trims(self):
        result = subtract_ranges(self.monday, [(hm_to_minutes("16:00"), hm_to_minutes("20:00"))])
        assert minutes_to_hm(result[-1].end) == "16:00"

    def test_window_covering_segment_drops_it(self):
        result = subtract_ranges(self.monday, [(hm_to_minutes("06:00"), hm_to_minutes("09:10"))])
        assert minutes_to_hm(result[0].start) == "09:15"
        assert len(result) == 2

    def test_empty_window_is_ignored(self):
        assert subtract_ranges(self.monday, [(600, 600)]) == self.monday

    def test_overlap_minutes(self):
        # 08:00-10:00 covers 60 min of the first segment and 45 of the second
        assert overlap_minutes(self.monday, [(hm_to_minutes("08:00"), hm_to_minutes("10:00"))]) == 105
        assert overlap_minutes([Segment(0, 60)], []) == 0


class TestTimeHelpers:

    def test_hm_round_trip(self):
        assert hm_to_minutes("09:15") == 555
        assert minutes_to_hm(555) == "09:15"

    def test_malformed_times_count_as_zero(self):
        assert hm_to_minutes("aa:bb") == 0
        assert hm_to_minutes(None) == 0
