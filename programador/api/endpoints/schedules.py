"""
Schedule Endpoints

Generation, listing, manual edit, archival and deletion of weekly schedules.
The scheduling rules live in services/; these handlers only translate the
request and pick the response model.
"""

from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List

from programador.db.session import get_db
from programador.schemas import ScheduleCreate, ScheduleEdit, ScheduleArchive, WeekScheduleResponse
from programador.services import schedules

router = APIRouter(prefix="/horarios", tags=["Schedules"])


@router.post("", response_model=List[WeekScheduleResponse], status_code=status.HTTP_201_CREATED)
def create_schedule(payload: ScheduleCreate, db: Session = Depends(get_db)):
    """
    Generate the weekly schedules of an employee for a date range.

    - **working_weekdays**: ISO weekdays (1 = Monday ... 7 = Sunday)
    - **holiday_overrides**: date -> "work" | "skip" for holidays on working days
    - **sunday_overrides**: date -> "compensado" | "sin-compensar"
    - **apply_banked_hours**: take the pending bank balance off the new weeks
    - **reduced_weekday**: 1-6, a Spanish weekday name or "random"

    Returns 409 with the blocking novedades when a working day is blocked.
    """
    return schedules.create_schedule(
        db,
        payload.empleado_id,
        payload.fecha_inicio,
        payload.fecha_fin,
        payload.working_weekdays,
        holiday_overrides=payload.holiday_overrides,
        sunday_overrides=payload.sunday_overrides,
        apply_banked_hours=payload.apply_banked_hours,
        reduced_weekday=payload.reduced_weekday,
        reduction_style=payload.tipo_jornada_reducida,
        creator=payload.creado_por,
        country_code=payload.country_code,
    )


@router.get("/{empleado_id}", response_model=List[WeekScheduleResponse])
def list_schedules(
    empleado_id: str,
    incluir_archivados: bool = Query(False, description="Include archived weeks"),
    db: Session = Depends(get_db),
):
    """List an employee's weeks, oldest first."""
    schedules.get_employee(db, empleado_id)
    return schedules.list_schedules(db, empleado_id, include_archived=incluir_archivados)


@router.patch("/archivar", response_model=dict)
def archive_schedules(payload: ScheduleArchive, db: Session = Depends(get_db)):
    archived = schedules.archive_schedules(db, payload.empleado_id)
    return {"archivados": archived}


@router.patch("/{horario_id}", response_model=WeekScheduleResponse)
def edit_schedule(horario_id: str, payload: ScheduleEdit, db: Session = Depends(get_db)):
    """
    Manually edit one week.

    - **overrides**: day ("Martes", "2025-01-07" or 2) -> hours
    - **reduced_day**: move the reduced schedule; 0 removes it
    - **domingo_estado**: Sunday compensation status
    """
    return schedules.edit_schedule(
        db,
        horario_id,
        overrides=payload.overrides,
        reduced_day=payload.reduced_day,
        reduction_style=payload.tipo_jornada_reducida,
        sunday_status=payload.domingo_estado,
    )


@router.delete("/{horario_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(horario_id: str, db: Session = Depends(get_db)):
    schedules.delete_schedule(db, horario_id)
    return None
