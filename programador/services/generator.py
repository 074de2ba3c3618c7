"""
Weekly Schedule Generator

Walks a date range in Monday-aligned weeks, applies the working-day, holiday
and Sunday policy to every date, allocates each eligible day through the
segment model and splits its hours into legal and payable extra against the
weekly ceilings. Holiday and Sunday treatment is asked from the caller
through decision callbacks; a ``cancel`` answer aborts the whole run.
"""

import logging
import math
import random
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from programador.core.dates import WEEKDAY_BY_NAME, daterange, iter_weeks
from programador.core.errors import CancelledByCaller, ConflictError, ValidationError
from programador.services.allocator import allocate
from programador.services.blocking import BlockingCalendar
from programador.services.segments import (
    EPSILON,
    MAX_DAILY_BANK,
    WEEKLY_EXTRA_LIMIT,
    WEEKLY_LEGAL_LIMIT,
    HolidayDecision,
    ReductionStyle,
    legal_cap,
    payable_extra_cap,
    segments_for,
    subtract_ranges,
)
from programador.services.week_plan import (
    SUNDAY_STATUSES,
    DayCapacity,
    DayPlan,
    WeekPlan,
    check_week_caps,
    round_hours,
)

logger = logging.getLogger(__name__)


CANCEL = "cancel"
RANDOM_REDUCED_DAY = "random"

HolidayDecider = Callable[[date, str], Optional[str]]
SundayDecider = Callable[[date, bool], Optional[str]]


def decisions_from_maps(
    holiday_decisions: Optional[Mapping[date, str]] = None,
    sunday_decisions: Optional[Mapping[date, str]] = None,
    default_holiday: Optional[str] = None,
) -> Tuple[HolidayDecider, SundayDecider]:
    """
    Build decision callbacks from pre-answered maps.

    A holiday missing from the map gets ``default_holiday``; when that is
    unset too the run is cancelled. Sundays missing from the map get no
    status.
    """
    holiday_decisions = dict(holiday_decisions or {})
    sunday_decisions = dict(sunday_decisions or {})

    def decide_holiday(day: date, name: str) -> Optional[str]:
        return holiday_decisions.get(day, default_holiday) or CANCEL

    def decide_sunday(day: date, is_working_day: bool) -> Optional[str]:
        return sunday_decisions.get(day)

    return decide_holiday, decide_sunday


def _validate_weekdays(working_weekdays: Iterable) -> frozenset:
    try:
        weekdays = frozenset(int(w) for w in working_weekdays or ())
    except (TypeError, ValueError):
        raise ValidationError("Working weekdays must be ISO weekday numbers (1-7)")
    if not weekdays:
        raise ValidationError("At least one working weekday is required")
    invalid = sorted(w for w in weekdays if not 1 <= w <= 7)
    if invalid:
        raise ValidationError(f"Invalid working weekdays: {invalid}", {"weekdays": invalid})
    return weekdays


def _resolve_reduced_weekday(reduced_weekday) -> Union[None, int, str]:
    if reduced_weekday is None or reduced_weekday == "":
        return None
    if reduced_weekday == RANDOM_REDUCED_DAY:
        return RANDOM_REDUCED_DAY
    if isinstance(reduced_weekday, str) and reduced_weekday in WEEKDAY_BY_NAME:
        reduced_weekday = WEEKDAY_BY_NAME[reduced_weekday]
    try:
        weekday = int(reduced_weekday)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid reduced weekday: {reduced_weekday!r}")
    if not 1 <= weekday <= 6:
        raise ValidationError("The reduced weekday must be between Monday (1) and Saturday (6)")
    return weekday


def parse_reduction_style(value) -> ReductionStyle:
    if not value:
        return ReductionStyle.LEAVE_EARLY
    try:
        return ReductionStyle(getattr(value, "value", value))
    except ValueError:
        raise ValidationError(
            f"Invalid reduction style {value!r}; expected one of {[s.value for s in ReductionStyle]}"
        )


def collect_decisions(
    start: date,
    end: date,
    working_weekdays: frozenset,
    holidays: Mapping[date, str],
    decide_holiday: Optional[HolidayDecider],
    decide_sunday: Optional[SundayDecider],
) -> Tuple[Dict[date, str], Dict[date, Optional[str]]]:
    """
    Ask every holiday and Sunday decision of the range up front, in date order.

    Holidays are only asked when they land on a requested working weekday
    other than Sunday; without a holiday callback they are not worked.
    """
    holiday_answers: Dict[date, str] = {}
    sunday_answers: Dict[date, Optional[str]] = {}

    for day in daterange(start, end):
        weekday = day.isoweekday()
        name = holidays.get(day)
        if name is not None and weekday != 7 and weekday in working_weekdays:
            answer = decide_holiday(day, name) if decide_holiday else HolidayDecision.SKIP.value
            if answer == CANCEL or answer is None:
                raise CancelledByCaller(
                    f"Holiday decision cancelled for {day.isoformat()} ({name})",
                    {"fecha": day.isoformat(), "festivo_nombre": name},
                )
            answer = getattr(answer, "value", answer)
            if answer not in (HolidayDecision.WORK.value, HolidayDecision.SKIP.value):
                raise ValidationError(
                    f"Invalid holiday decision {answer!r} for {day.isoformat()}", {"fecha": day.isoformat()}
                )
            holiday_answers[day] = answer

        if weekday == 7 and decide_sunday is not None:
            answer = decide_sunday(day, 7 in working_weekdays)
            if answer == CANCEL:
                raise CancelledByCaller(
                    f"Sunday decision cancelled for {day.isoformat()}", {"fecha": day.isoformat()}
                )
            if answer is not None and answer not in SUNDAY_STATUSES:
                raise ValidationError(
                    f"Invalid Sunday status {answer!r} for {day.isoformat()}", {"fecha": day.isoformat()}
                )
            sunday_answers[day] = answer

    return holiday_answers, sunday_answers


def schedulable_dates(
    start: date, end: date, working_weekdays: frozenset, holidays: Mapping[date, str], holiday_answers: Mapping[date, str]
) -> List[date]:
    """Dates of the range that would carry hours: working weekdays, not Sunday, not a skipped holiday."""
    dates = []
    for day in daterange(start, end):
        weekday = day.isoweekday()
        if weekday == 7 or weekday not in working_weekdays:
            continue
        if day in holidays and holiday_answers.get(day) != HolidayDecision.WORK.value:
            continue
        dates.append(day)
    return dates


def check_conflicts(calendar: Optional[BlockingCalendar], dates: Iterable[date]) -> None:
    """Raise ConflictError when any of ``dates`` is fully blocked."""
    if calendar is None:
        return
    bloqueos = calendar.conflicts(dates)
    if not bloqueos:
        return
    summary = "; ".join(
        f"{b['tipo']} {b['fecha_inicio']} - {b['fecha_fin']} ({', '.join(b['fechas'])})" for b in bloqueos
    )
    raise ConflictError(f"Working days collide with blocking novedades: {summary}", bloqueos)


def _pick_reduced_date(candidates: List[date], reduced, rng: random.Random) -> Optional[date]:
    if reduced is None or not candidates:
        return None
    if reduced == RANDOM_REDUCED_DAY:
        return rng.choice(candidates)
    for day in candidates:
        if day.isoweekday() == reduced:
            return day
    return None


def consume_bank(days: List[DayPlan], hours: float) -> float:
    """
    Take up to ``hours`` of banked time off the week's worked days.

    Extra hours go first, day by day, then legal hours. A day never gives
    more than the daily bank ceiling and never drops below zero. Returns the
    hours actually consumed.
    """
    remaining = hours
    for attr, consumed_attr in (("extra_hours", "bank_extra_consumed"), ("base_hours", "bank_legal_consumed")):
        for day in days:
            if remaining <= EPSILON:
                break
            room = MAX_DAILY_BANK - day.bank_consumed
            take = min(getattr(day, attr), room, remaining)
            if take <= EPSILON:
                continue
            setattr(day, attr, round_hours(getattr(day, attr) - take))
            setattr(day, consumed_attr, round_hours(getattr(day, consumed_attr) + take))
            remaining -= take
    return round_hours(hours - max(remaining, 0.0))


def generate(
    employee_id,
    start: date,
    end: date,
    working_weekdays: Iterable[int],
    holidays: Optional[Mapping[date, str]] = None,
    decide_holiday: Optional[HolidayDecider] = None,
    decide_sunday: Optional[SundayDecider] = None,
    calendar: Optional[BlockingCalendar] = None,
    pending_bank_hours: float = 0.0,
    apply_bank: bool = False,
    reduced_weekday=None,
    reduction_style: Union[str, ReductionStyle] = ReductionStyle.LEAVE_EARLY,
    rng: Optional[random.Random] = None,
    creator: Optional[str] = None,
    enforce_conflicts: bool = True,
) -> List[WeekPlan]:
    """
    Build the weeks of ``employee_id`` covering [start, end].

    Every date of the range is emitted, Monday first. Fully blocked dates
    get zero hours; Study windows are cut out of the day's segments before
    allocating. With ``apply_bank`` the pending bank balance is taken off
    the generated hours, week after week, until it runs out.

    Raises ValidationError on bad input, ConflictError when a working day
    is fully blocked (unless ``enforce_conflicts`` is off) and
    CancelledByCaller when a decision callback answers ``cancel``.
    """
    if start is None or end is None:
        raise ValidationError("A start and an end date are required")
    if start > end:
        raise ValidationError(
            f"Start date {start.isoformat()} is after end date {end.isoformat()}",
            {"fecha_inicio": start.isoformat(), "fecha_fin": end.isoformat()},
        )
    weekdays = _validate_weekdays(working_weekdays)
    reduced = _resolve_reduced_weekday(reduced_weekday)
    style = parse_reduction_style(reduction_style)
    if pending_bank_hours is None or not math.isfinite(pending_bank_hours) or pending_bank_hours < 0:
        raise ValidationError("Pending bank hours must be a finite number >= 0")

    holidays = dict(holidays or {})
    calendar = calendar or BlockingCalendar()
    rng = rng or random.Random()

    holiday_answers, sunday_answers = collect_decisions(
        start, end, weekdays, holidays, decide_holiday, decide_sunday
    )
    if enforce_conflicts:
        check_conflicts(calendar, schedulable_dates(start, end, weekdays, holidays, holiday_answers))

    bank_left = pending_bank_hours if apply_bank else 0.0
    weeks: List[WeekPlan] = []

    for monday, sunday in iter_weeks(start, end):
        week_start, week_end = max(monday, start), min(sunday, end)
        week = WeekPlan(start=week_start, end=week_end, employee_id=employee_id, creator=creator)

        eligible = []
        for day in daterange(week_start, week_end):
            plan = DayPlan(day=day, holiday_name=holidays.get(day), is_holiday=day in holidays)
            weekday = day.isoweekday()
            plan.holiday_worked = holiday_answers.get(day) == HolidayDecision.WORK.value
            plan.blocked_by = sorted({b.category.value for b in calendar.full_blocks_for(day)})

            if weekday == 7:
                plan.sunday_status = sunday_answers.get(day)
            elif weekday in weekdays and (not plan.is_holiday or plan.holiday_worked):
                plan.is_working = True
                if not plan.blocked_by:
                    eligible.append(plan)
            week.days.append(plan)

        reduced_candidates = [p.day for p in eligible if not p.holiday_worked]
        reduced_date = _pick_reduced_date(reduced_candidates, reduced, rng)

        legal_left, extra_left = WEEKLY_LEGAL_LIMIT, WEEKLY_EXTRA_LIMIT
        capacities: List[DayCapacity] = []
        segments_by_day = {}

        for plan in eligible:
            weekday = plan.weekday
            plan.is_reduced = plan.day == reduced_date
            plan.reduction_style = style.value if plan.is_reduced else None
            info = segments_for(
                weekday,
                is_holiday=plan.holiday_worked,
                holiday_decision=HolidayDecision.WORK if plan.holiday_worked else None,
                is_reduced=plan.is_reduced,
                reduction_style=style,
            )
            segments = subtract_ranges(info.segments, calendar.study_windows_for(plan.day))
            segments_by_day[plan.day] = segments
            target = sum(seg.minutes for seg in segments) / 60

            base = min(target, legal_cap(weekday), legal_left)
            extra = min(target - base, payable_extra_cap(weekday), extra_left)
            legal_left -= base
            extra_left -= extra
            plan.base_hours, plan.extra_hours = round_hours(base), round_hours(extra)
            capacities.append(DayCapacity.from_available(plan.day, target))

        if bank_left > EPSILON:
            taken = consume_bank(eligible, bank_left)
            bank_left = round_hours(bank_left - taken)

        for plan in eligible:
            total = plan.base_hours + plan.extra_hours
            plan.set_hours(total, plan.base_hours, plan.extra_hours, allocate(plan.day, segments_by_day[plan.day], total))

        check_week_caps(week.days, capacities)
        logger.debug(
            "Week %s..%s for %s: %.2f legal, %.2f extra, %.2f banked",
            week.start, week.end, employee_id, week.legal_hours, week.extra_hours, week.bank_consumed,
        )
        weeks.append(week)

    return weeks
