"""
Hours-Bank Reconciler

Keeps the compensation ledger: every week whose total goes over the 56h
combined ceiling leaves a pending entry, later weeks consume those entries
oldest first, and an operator can annul an entry at any time.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from programador.core.errors import NotFoundError, ValidationError
from programador.db.session import transaction
from programador.models.bank_entry import BankEntry, BankStatus
from programador.services.segments import EPSILON, WEEKLY_TOTAL_LIMIT
from programador.services.week_plan import WeekPlan, round_hours

logger = logging.getLogger(__name__)

OPEN_STATUSES = (BankStatus.PENDING, BankStatus.PARTIAL)


@dataclass
class BankApplication:
    entry_id: str
    hours_consumed: float
    target_week_start: Optional[date] = None
    target_week_end: Optional[date] = None


def compute_excess(total_hours: float) -> Optional[float]:
    """Hours over the weekly ceiling, or None when the week stays within it."""
    excess = round_hours(total_hours - WEEKLY_TOTAL_LIMIT)
    return excess if excess > 0 else None


def _status_for(entry: BankEntry, consumed: float) -> BankStatus:
    if entry.horas_pendientes <= EPSILON:
        return BankStatus.APPLIED
    if consumed > EPSILON:
        return BankStatus.PARTIAL
    return BankStatus.PENDING


def recompute_excess(db: Session, week: WeekPlan, already_consumed: float = 0.0) -> Optional[BankEntry]:
    """
    Record the week's excess in the ledger.

    An open entry for the same employee and week grows by the new excess
    instead of getting a sibling. ``already_consumed`` is subtracted from the
    pending balance of a fresh entry (hours an edited week had already paid
    back before its entries were reset). Does not commit.
    """
    excess = compute_excess(week.total_hours)
    if excess is None:
        return None

    entry = (
        db.query(BankEntry)
        .filter(
            BankEntry.empleado_id == week.employee_id,
            BankEntry.semana_inicio == week.start,
            BankEntry.estado.in_(OPEN_STATUSES),
        )
        .order_by(BankEntry.created_at.asc())
        .first()
    )
    if entry:
        entry.horas_excedidas = round_hours(entry.horas_excedidas + excess)
        entry.horas_pendientes = round_hours(entry.horas_pendientes + excess)
        logger.info("Bank entry %s for week %s grew by %.2fh", entry.id, week.start, excess)
        return entry

    pending = round_hours(max(0.0, excess - already_consumed))
    entry = BankEntry(
        empleado_id=week.employee_id,
        semana_inicio=week.start,
        semana_fin=week.end,
        horas_excedidas=excess,
        horas_pendientes=pending,
    )
    entry.estado = _status_for(entry, excess - pending)
    db.add(entry)
    db.flush()
    logger.info("Bank entry created for %s week %s: %.2fh excess", week.employee_id, week.start, excess)
    return entry


def reset_for_week(db: Session, employee_id: str, week_start: date) -> float:
    """
    Annul every live entry of one week so its excess can be derived again.

    Returns the hours those entries had already paid back. Flushes so a
    following lookup of open entries no longer sees them; does not commit.
    """
    entries = (
        db.query(BankEntry)
        .filter(
            BankEntry.empleado_id == employee_id,
            BankEntry.semana_inicio == week_start,
            BankEntry.estado != BankStatus.ANNULLED,
        )
        .all()
    )
    consumed = 0.0
    for entry in entries:
        consumed += entry.horas_excedidas - entry.horas_pendientes
        entry.horas_pendientes = 0
        entry.estado = BankStatus.ANNULLED
    if entries:
        db.flush()
        logger.info("Reset %d bank entries of week %s for %s", len(entries), week_start, employee_id)
    return round_hours(consumed)


def list_pending(db: Session, employee_id: str) -> List[BankEntry]:
    """Open entries, oldest week first."""
    return (
        db.query(BankEntry)
        .filter(BankEntry.empleado_id == employee_id, BankEntry.estado.in_(OPEN_STATUSES))
        .order_by(BankEntry.semana_inicio.asc(), BankEntry.created_at.asc())
        .all()
    )


def pending_balance(db: Session, employee_id: str) -> float:
    return round_hours(sum(entry.horas_pendientes for entry in list_pending(db, employee_id)))


def list_history(db: Session, employee_id: str, limit: int = 10) -> List[BankEntry]:
    """Every entry, newest week first."""
    return (
        db.query(BankEntry)
        .filter(BankEntry.empleado_id == employee_id)
        .order_by(BankEntry.semana_inicio.desc(), BankEntry.created_at.desc())
        .limit(limit)
        .all()
    )


def _consume(entry: BankEntry, hours: float, week_start: Optional[date], week_end: Optional[date]) -> None:
    entry.horas_pendientes = round_hours(max(0.0, entry.horas_pendientes - hours))
    entry.estado = BankStatus.PARTIAL if entry.horas_pendientes > EPSILON else BankStatus.APPLIED
    if week_start is not None:
        entry.semana_aplicada_inicio = week_start
    if week_end is not None:
        entry.semana_aplicada_fin = week_end


def debit(
    db: Session, employee_id: str, hours: float, week_start: date, week_end: date
) -> List[Tuple[BankEntry, float]]:
    """
    Take ``hours`` off the open entries, oldest first.

    Returns the (entry, hours taken) pairs. Does not commit.
    """
    taken: List[Tuple[BankEntry, float]] = []
    left = hours
    for entry in list_pending(db, employee_id):
        if left <= EPSILON:
            break
        take = round_hours(min(entry.horas_pendientes, left))
        if take <= EPSILON:
            continue
        _consume(entry, take, week_start, week_end)
        taken.append((entry, take))
        left -= take
    return taken


def apply_to_weeks(db: Session, employee_id: str, applications: Iterable[BankApplication]) -> List[BankEntry]:
    """
    Consume banked hours from specific entries.

    The batch is all-or-nothing: an unknown entry, an entry of another
    employee, a closed entry or a bad amount rolls back every update.
    """
    applications = list(applications)
    if not applications:
        raise ValidationError("No bank applications given")

    updated: List[BankEntry] = []
    with transaction(db, "bank application"):
        for application in applications:
            hours = application.hours_consumed
            if isinstance(hours, bool) or not isinstance(hours, (int, float)) or not math.isfinite(hours) or hours < 0:
                raise ValidationError(
                    f"Hours consumed must be a finite number >= 0 (entry {application.entry_id})",
                    {"entry_id": application.entry_id},
                )
            entry = (
                db.query(BankEntry)
                .filter(BankEntry.id == application.entry_id, BankEntry.empleado_id == employee_id)
                .first()
            )
            if not entry:
                raise NotFoundError(
                    f"Bank entry {application.entry_id} not found for employee {employee_id}",
                    {"entry_id": application.entry_id},
                )
            if entry.estado not in OPEN_STATUSES:
                raise ValidationError(
                    f"Bank entry {entry.id} is {entry.estado.value} and cannot be consumed",
                    {"entry_id": entry.id, "estado": entry.estado.value},
                )
            _consume(entry, hours, application.target_week_start, application.target_week_end)
            if entry not in updated:
                updated.append(entry)

    logger.info("Applied %d bank entries for %s", len(applications), employee_id)
    return updated


def annul(db: Session, entry_id: str) -> BankEntry:
    """Close an entry for good: zero pending, status annulled."""
    with transaction(db, "bank annulment"):
        entry = db.query(BankEntry).filter(BankEntry.id == entry_id).first()
        if not entry:
            raise NotFoundError(f"Bank entry {entry_id} not found", {"entry_id": entry_id})
        entry.horas_pendientes = 0
        entry.estado = BankStatus.ANNULLED
    logger.info("Bank entry %s annulled", entry_id)
    return entry
