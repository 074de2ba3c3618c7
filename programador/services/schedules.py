"""
Schedule orchestration

Loads what the engine needs from the database, runs generation or a manual
edit, and writes the result back in a single transaction together with the
bank ledger updates it implies.
"""

import logging
import random
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from programador.core.config import settings
from programador.core.errors import NotFoundError, SchedulingError
from programador.db.session import transaction
from programador.models.employee import Employee
from programador.models.holiday import Holiday
from programador.models.observation import Observation
from programador.models.schedule import DaySchedule, Visibility, WeekSchedule
from programador.services import hours_bank
from programador.services.blocking import BlockingCalendar
from programador.services.editing import recompute_week
from programador.services.generator import decisions_from_maps, generate
from programador.services.week_plan import DayPlan, WeekPlan

logger = logging.getLogger(__name__)


def get_employee(db: Session, employee_id: str) -> Employee:
    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError(f"Employee {employee_id} not found", {"empleado_id": employee_id})
    return employee


def get_week(db: Session, week_id: str) -> WeekSchedule:
    week = db.query(WeekSchedule).filter(WeekSchedule.id == week_id).first()
    if not week:
        raise NotFoundError(f"Schedule {week_id} not found", {"horario_id": week_id})
    return week


def load_calendar(db: Session, employee_id: str) -> BlockingCalendar:
    observations = db.query(Observation).filter(Observation.empleado_id == employee_id).all()
    return BlockingCalendar(o.to_raw() for o in observations)


def holidays_between(db: Session, start: date, end: date, country_code: Optional[str] = None) -> Dict[date, str]:
    country_code = country_code or settings.HOLIDAY_COUNTRY_CODE
    rows = (
        db.query(Holiday)
        .filter(Holiday.country_code == country_code, Holiday.fecha >= start, Holiday.fecha <= end)
        .order_by(Holiday.fecha.asc())
        .all()
    )
    return {row.fecha: row.nombre for row in rows}


def week_from_row(row: WeekSchedule) -> WeekPlan:
    return WeekPlan(
        start=row.fecha_inicio,
        end=row.fecha_fin,
        days=[DayPlan.from_dict(day.to_dict()) for day in row.dias],
        employee_id=row.empleado_id,
        creator=row.creado_por,
    )


def _day_columns(plan: DayPlan) -> dict:
    data = plan.to_dict()
    data["fecha"] = plan.day
    return data


def _insert_week(db: Session, week: WeekPlan) -> WeekSchedule:
    row = WeekSchedule(
        empleado_id=week.employee_id,
        fecha_inicio=week.start,
        fecha_fin=week.end,
        total_horas_semana=week.total_hours,
        creado_por=week.creator,
        estado_visibilidad=Visibility.PUBLIC,
    )
    row.dias = [DaySchedule(**_day_columns(day)) for day in week.days]
    db.add(row)
    return row


def archive_previous(db: Session, employee_id: str) -> int:
    """Archive every public week of the employee. Does not commit."""
    rows = (
        db.query(WeekSchedule)
        .filter(WeekSchedule.empleado_id == employee_id, WeekSchedule.estado_visibilidad == Visibility.PUBLIC)
        .all()
    )
    for row in rows:
        row.estado_visibilidad = Visibility.ARCHIVED
    return len(rows)


def create_schedule(
    db: Session,
    employee_id: str,
    start: date,
    end: date,
    working_weekdays: Iterable[int],
    holiday_overrides: Optional[Mapping[date, str]] = None,
    sunday_overrides: Optional[Mapping[date, str]] = None,
    apply_banked_hours: bool = False,
    reduced_weekday=None,
    reduction_style: Optional[str] = None,
    creator: Optional[str] = None,
    country_code: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> List[WeekSchedule]:
    """
    Generate and store the weeks of [start, end] for one employee.

    Previous public weeks are archived, banked hours taken by the new weeks
    are debited from the ledger and each week's excess is recorded. Nothing
    is stored when any step fails.
    """
    try:
        with transaction(db, "schedule generation"):
            get_employee(db, employee_id)
            decide_holiday, decide_sunday = decisions_from_maps(
                holiday_overrides, sunday_overrides, settings.DEFAULT_HOLIDAY_DECISION
            )
            weeks = generate(
                employee_id,
                start,
                end,
                working_weekdays,
                holidays=holidays_between(db, start, end, country_code),
                decide_holiday=decide_holiday,
                decide_sunday=decide_sunday,
                calendar=load_calendar(db, employee_id),
                pending_bank_hours=hours_bank.pending_balance(db, employee_id) if apply_banked_hours else 0.0,
                apply_bank=apply_banked_hours,
                reduced_weekday=reduced_weekday,
                reduction_style=reduction_style,
                rng=rng,
                creator=creator,
            )

            archived = archive_previous(db, employee_id)
            rows = []
            for week in weeks:
                if week.bank_consumed > 0:
                    taken = hours_bank.debit(db, employee_id, week.bank_consumed, week.start, week.end)
                    if taken:
                        for day in week.days:
                            if day.bank_consumed > 0:
                                day.bank_entry_id = taken[0][0].id
                rows.append(_insert_week(db, week))
                hours_bank.recompute_excess(db, week)
    except SchedulingError as exc:
        logger.warning("Schedule generation for %s rejected: %s", employee_id, exc.message)
        raise

    logger.info(
        "Generated %d weeks for %s (%s - %s), archived %d previous weeks",
        len(rows), employee_id, start, end, archived,
    )
    return rows


def list_schedules(db: Session, employee_id: str, include_archived: bool = False) -> List[WeekSchedule]:
    query = db.query(WeekSchedule).filter(WeekSchedule.empleado_id == employee_id)
    if not include_archived:
        query = query.filter(WeekSchedule.estado_visibilidad == Visibility.PUBLIC)
    return query.order_by(WeekSchedule.fecha_inicio.asc()).all()


def edit_schedule(
    db: Session,
    week_id: str,
    overrides: Optional[Mapping] = None,
    reduced_day=None,
    reduction_style: Optional[str] = None,
    sunday_status: Optional[str] = None,
) -> WeekSchedule:
    """
    Apply a manual edit to a stored week and re-derive its bank excess.

    The week's previous ledger entries are annulled first so the excess of
    the edited week is not counted twice.
    """
    try:
        with transaction(db, "schedule edit"):
            row = get_week(db, week_id)
            edited = recompute_week(
                week_from_row(row),
                overrides=overrides,
                reduced_day=reduced_day,
                reduction_style=reduction_style,
                sunday_status=sunday_status,
                calendar=load_calendar(db, row.empleado_id),
            )
            by_date = {day.fecha: day for day in row.dias}
            for plan in edited.days:
                day_row = by_date[plan.day]
                for column, value in _day_columns(plan).items():
                    setattr(day_row, column, value)
            row.total_horas_semana = edited.total_hours

            consumed = hours_bank.reset_for_week(db, row.empleado_id, row.fecha_inicio)
            hours_bank.recompute_excess(db, edited, already_consumed=consumed)
    except SchedulingError as exc:
        logger.warning("Edit of schedule %s rejected: %s", week_id, exc.message)
        raise

    logger.info("Schedule %s edited: %.2fh total", week_id, edited.total_hours)
    return row


def delete_schedule(db: Session, week_id: str) -> None:
    with transaction(db, "schedule deletion"):
        db.delete(get_week(db, week_id))
    logger.info("Schedule %s deleted", week_id)


def archive_schedules(db: Session, employee_id: str) -> int:
    with transaction(db, "schedule archival"):
        get_employee(db, employee_id)
        archived = archive_previous(db, employee_id)
    logger.info("Archived %d weeks for %s", archived, employee_id)
    return archived
