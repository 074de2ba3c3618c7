from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from programador.db.session import get_db
from programador.schemas import BankApply, BankEntryResponse
from programador.services import hours_bank
from programador.services.hours_bank import BankApplication
from programador.services.schedules import get_employee

router = APIRouter(prefix="/horas-compensacion", tags=["Hours Bank"])


@router.get("/{empleado_id}/pending", response_model=List[BankEntryResponse])
def list_pending(empleado_id: str, db: Session = Depends(get_db)):
    """Open entries of an employee, oldest week first."""
    get_employee(db, empleado_id)
    return hours_bank.list_pending(db, empleado_id)


@router.get("/{empleado_id}/history", response_model=List[BankEntryResponse])
def list_history(
    empleado_id: str,
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    get_employee(db, empleado_id)
    return hours_bank.list_history(db, empleado_id, limit=limit)


@router.patch("/apply/{empleado_id}", response_model=List[BankEntryResponse])
def apply_to_weeks(empleado_id: str, payload: BankApply, db: Session = Depends(get_db)):
    """Consume banked hours from specific entries. All or nothing."""
    applications = [
        BankApplication(
            entry_id=item.entry_id,
            hours_consumed=item.hours_consumed,
            target_week_start=item.target_week_start,
            target_week_end=item.target_week_end,
        )
        for item in payload.applications
    ]
    return hours_bank.apply_to_weeks(db, empleado_id, applications)


@router.patch("/{entry_id}/annul", response_model=BankEntryResponse)
def annul(entry_id: str, db: Session = Depends(get_db)):
    return hours_bank.annul(db, entry_id)
