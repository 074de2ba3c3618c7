"""
Manual Edit & Validation

Re-derives a stored week after an operator overrides day hours, moves the
reduced day or sets the Sunday status. The edited week must pass the same
blocking and weekly-cap rules as a generated one; any failure rejects the
whole edit.
"""

import logging
import math
from datetime import date
from typing import Dict, List, Mapping, Optional

from programador.core.dates import WEEKDAY_BY_NAME, parse_date_only
from programador.core.errors import ConflictError, ValidationError
from programador.services.allocator import allocate
from programador.services.blocking import BlockingCalendar
from programador.services.generator import parse_reduction_style
from programador.services.segments import (
    EPSILON,
    WEEKLY_EXTRA_LIMIT,
    WEEKLY_LEGAL_LIMIT,
    HolidayDecision,
    default_capacity,
    legal_cap,
    overlap_minutes,
    overtime_cap,
    payable_extra_cap,
    reduced_capacity,
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


def nominal_hours(day: DayPlan, is_reduced: bool) -> float:
    """Hours a day carries when nobody overrides it."""
    if day.weekday == 7 or not (day.is_working or day.holiday_worked):
        return 0
    if is_reduced and not day.holiday_worked:
        return reduced_capacity(day.weekday)
    decision = HolidayDecision.WORK if day.holiday_worked else None
    return default_capacity(day.weekday, is_holiday=day.holiday_worked, holiday_decision=decision)


def _day_for_key(week: WeekPlan, key) -> DayPlan:
    if isinstance(key, str) and key.strip().isdigit():
        key = int(key)
    if isinstance(key, int):
        matches = [d for d in week.days if d.weekday == key]
    else:
        parsed = parse_date_only(key) if len(str(key)) >= 10 else None
        if parsed is not None:
            matches = [d for d in week.days if d.day == parsed]
        else:
            weekday = WEEKDAY_BY_NAME.get(str(key).strip().capitalize())
            matches = [d for d in week.days if d.weekday == weekday]
    if not matches:
        raise ValidationError(f"Day {key!r} is not part of the week {week.start} - {week.end}", {"dia": str(key)})
    return matches[0]


def _parse_override(key, value) -> float:
    if isinstance(value, Mapping):
        value = value.get("horas", value.get("newHours"))
    if isinstance(value, bool):
        raise ValidationError(f"Hours for {key} must be a number", {"dia": str(key)})
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Hours for {key} must be a number", {"dia": str(key)})
    if not math.isfinite(hours) or hours < 0:
        raise ValidationError(f"Hours for {key} must be a finite number >= 0", {"dia": str(key), "horas": value})
    return hours


def recompute_week(
    week: WeekPlan,
    overrides: Optional[Mapping] = None,
    reduced_day=None,
    reduction_style: Optional[str] = None,
    sunday_status: Optional[str] = None,
    calendar: Optional[BlockingCalendar] = None,
) -> WeekPlan:
    """
    Return a recomputed copy of ``week``.

    ``overrides`` maps a day (Spanish weekday label, ISO date or ISO weekday
    number) to its new hours. ``reduced_day`` moves the reduced schedule to
    another day; None keeps the current one and 0 removes it.
    ``sunday_status`` applies to the week's Sunday when given.

    Days without an override keep a previous manual value; the rest go back
    to their nominal capacity less any bank time already taken from them.
    """
    edited = week.copy()
    calendar = calendar or BlockingCalendar()

    parsed: Dict[date, float] = {}
    for key, value in (overrides or {}).items():
        day = _day_for_key(edited, key)
        parsed[day.day] = _parse_override(key, value)

    current_reduced = next((d for d in edited.days if d.is_reduced), None)
    style = parse_reduction_style(
        reduction_style or (current_reduced.reduction_style if current_reduced else None)
    )
    if reduced_day is None:
        reduced_date = current_reduced.day if current_reduced else None
    elif reduced_day in (0, "", "ninguno"):
        reduced_date = None
    else:
        target = _day_for_key(edited, reduced_day)
        if target.weekday == 7:
            raise ValidationError("Sunday cannot be the reduced day", {"dia": target.label})
        if target.holiday_worked:
            raise ValidationError("A worked holiday cannot be the reduced day", {"dia": target.label})
        if not target.is_working:
            raise ValidationError("A day off cannot be the reduced day", {"dia": target.label})
        if calendar.full_blocks_for(target.day):
            raise ValidationError("A blocked day cannot be the reduced day", {"dia": target.label})
        reduced_date = target.day

    if sunday_status is not None and sunday_status not in SUNDAY_STATUSES:
        raise ValidationError(f"Invalid Sunday status {sunday_status!r}", {"domingo_estado": sunday_status})

    blocked: List[dict] = []
    capacities: List[DayCapacity] = []
    legal_left, extra_left = WEEKLY_LEGAL_LIMIT, WEEKLY_EXTRA_LIMIT

    for day in edited.days:
        weekday = day.weekday
        is_reduced = day.day == reduced_date
        info = segments_for(
            weekday,
            is_holiday=day.holiday_worked,
            holiday_decision=HolidayDecision.WORK if day.holiday_worked else None,
            is_reduced=is_reduced,
            reduction_style=style,
        )
        windows = calendar.study_windows_for(day.day)
        segments = subtract_ranges(info.segments, windows)
        study_hours = overlap_minutes(info.segments, windows) / 60
        full_blocks = calendar.full_blocks_for(day.day)
        nominal = max(0.0, nominal_hours(day, is_reduced) - study_hours)
        charged = None

        if day.day in parsed:
            requested = min(parsed[day.day], overtime_cap(weekday))
            hours = max(0.0, requested - study_hours)
            if full_blocks and hours > EPSILON:
                blocked.append(
                    {
                        "fecha": day.day.isoformat(),
                        "descripcion": day.label,
                        "tipos": sorted({b.category.value for b in full_blocks}),
                        "horas": round_hours(hours),
                    }
                )
                continue
            before = day.original_hours if day.original_hours is not None else day.hours
            if abs(hours - before) > EPSILON:
                day.original_hours = round_hours(before)
                day.manually_reduced = hours < before
            else:
                day.original_hours = None
                day.manually_reduced = False
            day.clear_bank()
            base = min(hours, legal_cap(weekday))
            extra = hours - base
        elif full_blocks:
            # a fully blocked day never keeps hours it was not explicitly given
            hours = base = extra = 0.0
        elif day.original_hours is not None:
            hours = day.hours
            base = min(hours, legal_cap(weekday))
            extra = hours - base
        else:
            base = min(nominal, legal_cap(weekday), legal_left)
            extra = min(nominal - base, payable_extra_cap(weekday), extra_left)
            charged = (base, extra)
            extra -= min(extra, day.bank_extra_consumed)
            base -= min(base, day.bank_legal_consumed)
            hours = base + extra

        # the weekly budget is charged before bank time is taken off
        charged_base, charged_extra = charged or (base, extra)
        legal_left = max(0.0, legal_left - charged_base)
        extra_left = max(0.0, extra_left - min(charged_extra, payable_extra_cap(weekday)))

        if weekday == 7 and sunday_status is not None:
            day.sunday_status = sunday_status

        day.is_reduced = is_reduced
        day.reduction_style = style.value if is_reduced else None
        day.blocked_by = sorted({b.category.value for b in full_blocks})
        day.set_hours(hours, base, extra, allocate(day.day, segments, hours))

        # an overridden day counts toward capacity only when it is worked
        if day.day in parsed:
            available = max(nominal, hours) if hours > EPSILON else 0.0
        else:
            available = nominal
        if available > EPSILON and not full_blocks:
            capacities.append(DayCapacity.from_available(day.day, available))

    if blocked:
        summary = ", ".join(f"{b['descripcion']} {b['fecha']} ({'/'.join(b['tipos'])})" for b in blocked)
        logger.warning("Edit of week %s rejected: hours on blocked days %s", week.start, summary)
        raise ConflictError(f"Cannot assign hours to blocked days: {summary}", blocked)

    check_week_caps(edited.days, capacities)
    return edited
