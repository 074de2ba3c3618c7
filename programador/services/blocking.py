"""
Blocking Calendar

Turns raw novedad records (vacations, incapacities, licenses, permits, study
blocks, family days) into date-ranged blocking intervals and indexes them by
date. Every category except Study blocks the whole day; Study only removes
the listed time windows from the day's segments.
"""

import enum
import logging
import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from programador.core.dates import daterange, hm_to_minutes, minutes_to_hm, parse_date_only

logger = logging.getLogger(__name__)


class NovedadType(str, enum.Enum):
    INCAPACIDADES = "Incapacidades"
    LICENCIAS = "Licencias"
    VACACIONES = "Vacaciones"
    PERMISOS = "Permisos"
    ESTUDIO = "Estudio"
    DIA_FAMILIA = "Día de la Familia"


BLOCKING_TYPES = {t.value for t in NovedadType}


@dataclass(frozen=True)
class StudyWindow:
    """One study slot: either a specific date or a weekday repeated over the interval."""

    start: int
    end: int
    day: Optional[date] = None
    weekday: Optional[int] = None


@dataclass
class BlockingInterval:
    id: Any
    category: NovedadType
    note: str
    start: date
    end: date
    details: Dict[str, Any] = field(default_factory=dict)
    study_windows: Tuple[StudyWindow, ...] = ()

    @property
    def is_full_block(self) -> bool:
        return self.category != NovedadType.ESTUDIO

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tipo": self.category.value,
            "observacion": self.note,
            "fecha_inicio": self.start.isoformat(),
            "fecha_fin": self.end.isoformat(),
            "bloqueo_total": self.is_full_block,
            "details": self.details,
        }


@dataclass(frozen=True)
class BlockedDay:
    """An interval as seen from one date; ``window`` is set for study slots."""

    interval: BlockingInterval
    window: Optional[Tuple[int, int]] = None

    @property
    def category(self) -> NovedadType:
        return self.interval.category

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.interval.id,
            "tipo": self.interval.category.value,
            "observacion": self.interval.note,
            "fecha_inicio": self.interval.start.isoformat(),
            "fecha_fin": self.interval.end.isoformat(),
        }
        if self.window is not None:
            data["range"] = f"{minutes_to_hm(self.window[0])} - {minutes_to_hm(self.window[1])}"
        return data


# ============= Start/end extraction per category =============

def _first(*values):
    for value in values:
        if value:
            return value
    return None


# End candidates stop at explicit end fields; infer_end supplies the rest.

def _vacation_bounds(obs: Mapping, details: Mapping):
    start = _first(
        details.get("fecha_inicio_vacaciones"), details.get("fecha_inicio"), obs.get("fecha_inicio"), obs.get("fecha_novedad")
    )
    end = _first(details.get("fecha_fin_vacaciones"), details.get("fecha_fin"), obs.get("fecha_fin"))
    return start, end


def _license_bounds(obs: Mapping, details: Mapping):
    start = _first(
        details.get("fecha_inicio"), details.get("fecha_inicio_licencia"), obs.get("fecha_inicio"), obs.get("fecha_novedad")
    )
    end = _first(details.get("fecha_termino"), details.get("fecha_termino_licencia"), obs.get("fecha_fin"))
    return start, end


def _incapacity_bounds(obs: Mapping, details: Mapping):
    start = _first(
        details.get("fecha_inicio"),
        details.get("fecha_inicio_incapacidad"),
        obs.get("fecha_inicio"),
        obs.get("fecha_novedad"),
    )
    end = _first(details.get("fecha_fin"), details.get("fecha_fin_incapacidad"), obs.get("fecha_fin"))
    return start, end


def _permit_bounds(obs: Mapping, details: Mapping):
    start = _first(
        details.get("fecha_inicio"), details.get("fecha_inicio_permiso"), obs.get("fecha_inicio"), obs.get("fecha_novedad")
    )
    end = _first(details.get("fecha_fin"), details.get("fecha_fin_permiso"), obs.get("fecha_fin"))
    return start, end


def _family_day_bounds(obs: Mapping, details: Mapping):
    start = _first(
        details.get("fecha_inicio"),
        details.get("fecha_inicio_dia_familia"),
        details.get("fecha_propuesta_dia_familia"),
        obs.get("fecha_inicio"),
        obs.get("fecha_novedad"),
    )
    end = _first(details.get("fecha_fin"), details.get("fecha_fin_dia_familia"), obs.get("fecha_fin"))
    return start, end


def _study_bounds(obs: Mapping, details: Mapping):
    dated = sorted(
        d for d in (parse_date_only(item.get("fecha")) for item in _study_entries(details)) if d is not None
    )
    if dated:
        return dated[0], dated[-1]
    start = _first(
        details.get("fecha_inicio"), details.get("fecha_inicio_estudio"), obs.get("fecha_inicio"), obs.get("fecha_novedad")
    )
    end = _first(details.get("fecha_fin"), obs.get("fecha_fin"))
    return start, end


_BOUNDS: Dict[NovedadType, Callable[[Mapping, Mapping], tuple]] = {
    NovedadType.VACACIONES: _vacation_bounds,
    NovedadType.LICENCIAS: _license_bounds,
    NovedadType.INCAPACIDADES: _incapacity_bounds,
    NovedadType.PERMISOS: _permit_bounds,
    NovedadType.DIA_FAMILIA: _family_day_bounds,
    NovedadType.ESTUDIO: _study_bounds,
}


def _study_entries(details: Mapping) -> List[Mapping]:
    entries = details.get("dias_estudio")
    if not isinstance(entries, list):
        return []
    return [item for item in entries if isinstance(item, Mapping)]


def _study_windows(details: Mapping) -> Tuple[StudyWindow, ...]:
    windows = []
    for item in _study_entries(details):
        start = hm_to_minutes(item.get("inicio"))
        end = hm_to_minutes(item.get("fin"))
        if end <= start:
            continue
        day = parse_date_only(item.get("fecha"))
        if day is not None:
            windows.append(StudyWindow(start, end, day=day))
            continue
        try:
            weekday = int(item.get("dia"))
        except (TypeError, ValueError):
            continue
        if 1 <= weekday <= 7:
            windows.append(StudyWindow(start, end, weekday=weekday))
    return tuple(windows)


def _duration_days(value) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value) if value > 0 else None
    match = re.search(r"\d+", str(value))
    if match:
        days = int(match.group(0))
        return days if days > 0 else None
    return None


def infer_end(category: NovedadType, start: date, raw_end, details: Mapping) -> date:
    """
    Resolve the inclusive end date of a novedad.

    Fallback order: explicit end, vacation return date minus one day,
    ``duracion_dias``, the digits of ``diasIncapacidad``, and finally the
    start date itself. Any candidate before ``start`` is discarded.
    """
    end = parse_date_only(raw_end)
    if end is not None and end >= start:
        return end

    if category == NovedadType.VACACIONES:
        regreso = parse_date_only(details.get("fecha_regreso_vacaciones"))
        if regreso is not None and regreso - timedelta(days=1) >= start:
            return regreso - timedelta(days=1)

    for key in ("duracion_dias", "diasIncapacidad"):
        days = _duration_days(details.get(key))
        if days:
            return start + timedelta(days=days - 1)

    return start


def normalize_observation(obs) -> Optional[BlockingInterval]:
    """Normalize one raw observation; None if it does not block."""
    if obs is None:
        return None
    if isinstance(obs, BlockingInterval):
        return obs

    tipo = obs.get("tipo_novedad") or obs.get("tipo")
    if tipo not in BLOCKING_TYPES:
        return None
    category = NovedadType(tipo)

    details = obs.get("details")
    if not isinstance(details, Mapping):
        details = {}

    start_candidate, end_candidate = _BOUNDS[category](obs, details)
    start = parse_date_only(start_candidate)
    if start is None:
        logger.debug("Skipping %s observation %s without a usable start date", tipo, obs.get("id"))
        return None

    return BlockingInterval(
        id=obs.get("id"),
        category=category,
        note=obs.get("observacion") or "",
        start=start,
        end=infer_end(category, start, end_candidate, details),
        details=dict(details),
        study_windows=_study_windows(details) if category == NovedadType.ESTUDIO else (),
    )


def normalize(observations: Optional[Iterable]) -> List[BlockingInterval]:
    """
    Blocking intervals from raw observations, sorted by start date.

    Already-normalized intervals pass through unchanged, so normalizing a
    normalized list is a no-op.
    """
    intervals = [normalize_observation(obs) for obs in (observations or [])]
    return sorted((i for i in intervals if i is not None), key=lambda i: i.start)


def date_index(intervals: Iterable[BlockingInterval]) -> Dict[date, List[BlockedDay]]:
    """
    Expand intervals into the dates they cover.

    Study intervals carrying time slots are indexed only on the slot dates
    (or the matching weekdays inside the interval, for weekday slots), each
    with its window attached. Everything else covers every date of
    [start, end].
    """
    index: Dict[date, List[BlockedDay]] = defaultdict(list)
    for interval in intervals:
        if interval.category == NovedadType.ESTUDIO and interval.study_windows:
            for window in interval.study_windows:
                span = (window.start, window.end)
                if window.day is not None:
                    index[window.day].append(BlockedDay(interval, span))
                    continue
                for day in daterange(interval.start, interval.end):
                    if day.isoweekday() == window.weekday:
                        index[day].append(BlockedDay(interval, span))
            continue
        for day in daterange(interval.start, interval.end):
            index[day].append(BlockedDay(interval))
    return dict(index)


class BlockingCalendar:
    """Per-date lookup over the normalized intervals of one employee."""

    def __init__(self, observations: Optional[Iterable] = None):
        self.intervals = normalize(observations)
        self.index = date_index(self.intervals)

    def blocks_for(self, day: date) -> List[BlockedDay]:
        return self.index.get(day, [])

    def full_blocks_for(self, day: date) -> List[BlockedDay]:
        return [b for b in self.blocks_for(day) if b.interval.is_full_block]

    def is_fully_blocked(self, day: date) -> bool:
        return bool(self.full_blocks_for(day))

    def study_windows_for(self, day: date) -> List[Tuple[int, int]]:
        return [b.window for b in self.blocks_for(day) if not b.interval.is_full_block and b.window is not None]

    def conflicts(self, days: Iterable[date]) -> List[Dict[str, Any]]:
        """
        Full-block intervals touching ``days``, one entry per interval with
        the offending dates listed.
        """
        hits: Dict[int, Dict[str, Any]] = {}
        for day in sorted(set(days)):
            for blocked in self.full_blocks_for(day):
                key = id(blocked.interval)
                if key not in hits:
                    hits[key] = {**blocked.to_dict(), "fechas": []}
                hits[key]["fechas"].append(day.isoformat())
        return sorted(hits.values(), key=lambda c: (c["fecha_inicio"], c["tipo"]))

    def index_as_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {day.isoformat(): [b.to_dict() for b in blocks] for day, blocks in sorted(self.index.items())}
