"""
Time-Segment Model

Defines, for a weekday / holiday / reduced-schedule combination, the ordered
work segments of the day (minutes since midnight) with the breakfast and
lunch breaks between them, and the hour caps used to split worked hours into
legal (base), payable extra and banked hours.
"""

import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from programador.core.dates import hm_to_minutes


WEEKLY_LEGAL_LIMIT = 44
WEEKLY_EXTRA_LIMIT = 12
WEEKLY_TOTAL_LIMIT = WEEKLY_LEGAL_LIMIT + WEEKLY_EXTRA_LIMIT  # 56
MAX_DAILY_BANK = 4
HOLIDAY_HOURS = 6

BREAKFAST_MINUTES = 15
LUNCH_MINUTES = 45

EPSILON = 1e-6


class ReductionStyle(str, enum.Enum):
    LEAVE_EARLY = "salir-temprano"
    ARRIVE_LATE = "entrar-tarde"


class HolidayDecision(str, enum.Enum):
    WORK = "work"
    SKIP = "skip"


@dataclass(frozen=True)
class Segment:
    start: int  # minutes since midnight
    end: int

    @property
    def minutes(self) -> int:
        return max(0, self.end - self.start)


@dataclass(frozen=True)
class Break:
    start: int
    duration: int


@dataclass(frozen=True)
class DayInfo:
    capacity_hours: float
    segments: Tuple[Segment, ...] = field(default_factory=tuple)
    breaks: Tuple[Break, ...] = field(default_factory=tuple)

    @property
    def segment_minutes(self) -> int:
        return sum(seg.minutes for seg in self.segments)


def _seg(start: str, end: str) -> Segment:
    return Segment(hm_to_minutes(start), hm_to_minutes(end))


_BREAKS = (
    Break(hm_to_minutes("09:00"), BREAKFAST_MINUTES),
    Break(hm_to_minutes("12:00"), LUNCH_MINUTES),
)

_HOLIDAY_DAY = DayInfo(
    capacity_hours=HOLIDAY_HOURS,
    segments=(_seg("07:00", "13:00"),),
    breaks=(Break(hm_to_minutes("09:00"), BREAKFAST_MINUTES),),
)

_SUNDAY = DayInfo(capacity_hours=0)

# (is_saturday, reduction) -> day layout; reduction None means a regular day
_LAYOUTS = {
    (True, None): DayInfo(7, (_seg("07:00", "09:00"), _seg("09:15", "12:00"), _seg("12:45", "15:00")), _BREAKS),
    (True, ReductionStyle.LEAVE_EARLY): DayInfo(
        6, (_seg("07:00", "09:00"), _seg("09:15", "12:00"), _seg("12:45", "14:00")), _BREAKS
    ),
    (True, ReductionStyle.ARRIVE_LATE): DayInfo(
        6, (_seg("08:00", "09:00"), _seg("09:15", "12:00"), _seg("12:45", "15:00")), _BREAKS
    ),
    (False, None): DayInfo(10, (_seg("07:00", "09:00"), _seg("09:15", "12:00"), _seg("12:45", "18:00")), _BREAKS),
    (False, ReductionStyle.LEAVE_EARLY): DayInfo(
        9, (_seg("07:00", "09:00"), _seg("09:15", "12:00"), _seg("12:45", "17:00")), _BREAKS
    ),
    (False, ReductionStyle.ARRIVE_LATE): DayInfo(
        9, (_seg("08:00", "09:00"), _seg("09:15", "12:00"), _seg("12:45", "18:00")), _BREAKS
    ),
}


def segments_for(
    weekday: int,
    is_holiday: bool = False,
    holiday_decision: Optional[str] = None,
    is_reduced: bool = False,
    reduction_style: Optional[str] = None,
) -> DayInfo:
    """
    Work layout for a day.

    Sunday has no segments whatever the other flags say. A worked holiday
    uses the fixed 07:00-13:00 layout. A reduced day without an explicit
    style leaves early.
    """
    if weekday == 7:
        return _SUNDAY
    if is_holiday and holiday_decision == HolidayDecision.WORK:
        return _HOLIDAY_DAY

    reduction = None
    if is_reduced:
        reduction = ReductionStyle(reduction_style) if reduction_style else ReductionStyle.LEAVE_EARLY
    return _LAYOUTS[(weekday == 6, reduction)]


def legal_cap(weekday: int) -> float:
    """Payable base ceiling for the day."""
    if weekday == 6:
        return 4
    if 1 <= weekday <= 5:
        return 8
    return 0


def regular_cap(weekday: int) -> float:
    """Regular total before any hour goes to the bank."""
    if weekday == 6:
        return 7
    if 1 <= weekday <= 5:
        return 10
    return 0


def payable_extra_cap(weekday: int) -> float:
    if weekday == 6:
        return 3
    if 1 <= weekday <= 5:
        return 2
    return 0


def overtime_cap(weekday: int) -> float:
    """Absolute daily ceiling: regular capacity plus the daily bank."""
    regular = regular_cap(weekday)
    return regular + MAX_DAILY_BANK if regular > 0 else 0


def reduced_capacity(weekday: int) -> float:
    if weekday == 6:
        return 6
    if 1 <= weekday <= 5:
        return 9
    return 0


def default_capacity(weekday: int, is_holiday: bool = False, holiday_decision: Optional[str] = None) -> float:
    """Nominal hours of a non-reduced day, used when nothing overrides it."""
    if is_holiday and holiday_decision == HolidayDecision.WORK:
        return HOLIDAY_HOURS
    return regular_cap(weekday)


def subtract_ranges(segments: Iterable[Segment], ranges: Iterable[Tuple[int, int]]) -> List[Segment]:
    """
    Remove time windows from a list of segments.

    A window covering a whole segment drops it, one cutting an edge trims
    it and one strictly inside splits it in two.
    """
    current = list(segments)
    for start, end in ranges:
        if end <= start:
            continue
        remaining = []
        for seg in current:
            if end <= seg.start or start >= seg.end:
                remaining.append(seg)
                continue
            if start > seg.start:
                remaining.append(Segment(seg.start, start))
            if end < seg.end:
                remaining.append(Segment(end, seg.end))
        current = remaining
    return sorted(current, key=lambda seg: seg.start)


def overlap_minutes(segments: Iterable[Segment], ranges: Iterable[Tuple[int, int]]) -> int:
    """Minutes of ``segments`` covered by ``ranges``."""
    segments = list(segments)
    before = sum(seg.minutes for seg in segments)
    after = sum(seg.minutes for seg in subtract_ranges(segments, ranges))
    return before - after
