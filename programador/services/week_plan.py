"""
Day and week schedule records produced by the generator and the manual edit
flow, plus the weekly cap validation both of them run before handing a week
back.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional

from programador.core.dates import hm_to_minutes, parse_date_only, weekday_label
from programador.core.errors import CapacityError
from programador.services.allocator import Allocation, Block
from programador.services.segments import (
    EPSILON,
    WEEKLY_EXTRA_LIMIT,
    WEEKLY_LEGAL_LIMIT,
    legal_cap,
    payable_extra_cap,
)


SUNDAY_STATUSES = ("compensado", "sin-compensar")


def round_hours(value: float) -> float:
    return round(float(value), 2)


@dataclass
class DayPlan:
    day: date
    hours: float = 0.0
    base_hours: float = 0.0
    extra_hours: float = 0.0
    blocks: List[Block] = field(default_factory=list)
    entry_time: Optional[str] = None
    exit_time: Optional[str] = None
    is_working: bool = False
    is_reduced: bool = False
    reduction_style: Optional[str] = None
    sunday_status: Optional[str] = None
    is_holiday: bool = False
    holiday_worked: bool = False
    holiday_name: Optional[str] = None
    manually_reduced: bool = False
    original_hours: Optional[float] = None
    bank_extra_consumed: float = 0.0
    bank_legal_consumed: float = 0.0
    bank_entry_id: Optional[str] = None
    blocked_by: List[str] = field(default_factory=list)

    @property
    def weekday(self) -> int:
        return self.day.isoweekday()

    @property
    def label(self) -> str:
        return weekday_label(self.day)

    @property
    def bank_consumed(self) -> float:
        return self.bank_extra_consumed + self.bank_legal_consumed

    def set_hours(self, hours: float, base: float, extra: float, allocation: Allocation) -> None:
        self.hours = round_hours(hours)
        self.base_hours = round_hours(base)
        self.extra_hours = round_hours(extra)
        self.blocks = allocation.blocks
        self.entry_time = allocation.entry_time
        self.exit_time = allocation.exit_time

    def clear_bank(self) -> None:
        self.bank_extra_consumed = 0.0
        self.bank_legal_consumed = 0.0
        self.bank_entry_id = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fecha": self.day.isoformat(),
            "descripcion": self.label,
            "horas": self.hours,
            "horas_base": self.base_hours,
            "horas_extra": self.extra_hours,
            "bloques": [block.to_dict() for block in self.blocks],
            "jornada_entrada": self.entry_time,
            "jornada_salida": self.exit_time,
            "jornada_reducida": self.is_reduced,
            "tipo_jornada_reducida": self.reduction_style,
            "domingo_estado": self.sunday_status,
            "es_festivo": self.is_holiday,
            "festivo_trabajado": self.holiday_worked,
            "festivo_nombre": self.holiday_name,
            "es_laborable": self.is_working,
            "horas_reducidas_manualmente": self.manually_reduced,
            "horas_originales": self.original_hours,
            "horas_extra_reducidas": round_hours(self.bank_extra_consumed),
            "horas_legales_reducidas": round_hours(self.bank_legal_consumed),
            "banco_compensacion_id": self.bank_entry_id,
            "bloqueado_por": list(self.blocked_by),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DayPlan":
        """Rebuild a day from its stored (wire-named) form."""
        day = parse_date_only(data.get("fecha"))
        blocks = []
        for raw in data.get("bloques") or []:
            start, end = raw.get("start"), raw.get("end")
            if not start or not end:
                continue
            blocks.append(Block(day, hm_to_minutes(str(start)[11:16]), hm_to_minutes(str(end)[11:16])))
        return cls(
            day=day,
            hours=float(data.get("horas") or 0),
            base_hours=float(data.get("horas_base") or 0),
            extra_hours=float(data.get("horas_extra") or 0),
            blocks=blocks,
            entry_time=data.get("jornada_entrada"),
            exit_time=data.get("jornada_salida"),
            is_working=bool(data.get("es_laborable")),
            is_reduced=bool(data.get("jornada_reducida")),
            reduction_style=data.get("tipo_jornada_reducida"),
            sunday_status=data.get("domingo_estado"),
            is_holiday=bool(data.get("es_festivo")),
            holiday_worked=bool(data.get("festivo_trabajado")),
            holiday_name=data.get("festivo_nombre"),
            manually_reduced=bool(data.get("horas_reducidas_manualmente")),
            original_hours=data.get("horas_originales"),
            bank_extra_consumed=float(data.get("horas_extra_reducidas") or 0),
            bank_legal_consumed=float(data.get("horas_legales_reducidas") or 0),
            bank_entry_id=data.get("banco_compensacion_id"),
            blocked_by=list(data.get("bloqueado_por") or []),
        )


@dataclass
class WeekPlan:
    start: date
    end: date
    days: List[DayPlan] = field(default_factory=list)
    employee_id: Optional[str] = None
    creator: Optional[str] = None

    @property
    def total_hours(self) -> float:
        return round_hours(sum(d.hours for d in self.days))

    @property
    def legal_hours(self) -> float:
        return round_hours(sum(d.base_hours for d in self.days))

    @property
    def extra_hours(self) -> float:
        return round_hours(sum(d.extra_hours for d in self.days))

    @property
    def bank_consumed(self) -> float:
        return round_hours(sum(d.bank_consumed for d in self.days))

    def day_for(self, value: date) -> Optional[DayPlan]:
        for day in self.days:
            if day.day == value:
                return day
        return None

    def copy(self) -> "WeekPlan":
        return replace(self, days=[replace(d, blocks=list(d.blocks), blocked_by=list(d.blocked_by)) for d in self.days])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "empleado_id": self.employee_id,
            "fecha_inicio": self.start.isoformat(),
            "fecha_fin": self.end.isoformat(),
            "dias": [d.to_dict() for d in self.days],
            "total_horas_semana": self.total_hours,
            "creado_por": self.creator,
        }


@dataclass(frozen=True)
class DayCapacity:
    """What a worked day could carry: its legal share and its payable extra share."""

    day: date
    legal: float
    extra: float

    @classmethod
    def from_available(cls, day: date, available_hours: float) -> "DayCapacity":
        weekday = day.isoweekday()
        legal = min(legal_cap(weekday), max(0.0, available_hours))
        extra = min(payable_extra_cap(weekday), max(0.0, available_hours - legal))
        return cls(day, legal, extra)


def check_week_caps(days: Iterable[DayPlan], capacities: Iterable[DayCapacity]) -> None:
    """
    Validate the weekly ceilings of a finished week.

    Payable extra is each day's extra clamped to its payable cap; anything
    above that is bank material and is not counted here. Raises
    CapacityError naming the failed rule, its limit and the computed value.
    """
    days = list(days)
    capacities = list(capacities)

    legal_sum = round_hours(sum(d.base_hours for d in days))
    payable_sum = round_hours(sum(min(d.extra_hours, payable_extra_cap(d.weekday)) for d in days))

    if legal_sum > WEEKLY_LEGAL_LIMIT + EPSILON:
        raise CapacityError(
            f"Weekly legal hours {legal_sum} exceed {WEEKLY_LEGAL_LIMIT}",
            limit=WEEKLY_LEGAL_LIMIT,
            value=legal_sum,
            rule="weekly_legal_limit",
        )

    extra_limit = round_hours(min(WEEKLY_EXTRA_LIMIT, sum(c.extra for c in capacities)))
    if payable_sum > extra_limit + EPSILON:
        raise CapacityError(
            f"Weekly payable extra hours {payable_sum} exceed {extra_limit}",
            limit=extra_limit,
            value=payable_sum,
            rule="weekly_extra_limit",
        )

    if payable_sum > EPSILON:
        achievable = round_hours(min(WEEKLY_LEGAL_LIMIT, sum(c.legal for c in capacities)))
        if legal_sum < achievable - EPSILON:
            raise CapacityError(
                f"Extra hours require the full legal week: {legal_sum} of {achievable} legal hours assigned",
                limit=achievable,
                value=legal_sum,
                rule="extra_requires_full_legal",
            )
