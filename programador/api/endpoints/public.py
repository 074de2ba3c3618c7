from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from programador.core.config import settings
from programador.db.session import get_db
from programador.models.employee import Employee
from programador.models.observation import Observation
from programador.schemas import PublicLookup, PublicLookupResponse
from programador.services.schedules import list_schedules

router = APIRouter(prefix="/public", tags=["Public"])


@router.post("/consulta-horarios", response_model=PublicLookupResponse)
def lookup_schedules(payload: PublicLookup, db: Session = Depends(get_db)):
    """Public weeks and recent novedades of an employee, looked up by cedula."""
    employee = db.query(Employee).filter(Employee.cedula == payload.cedula.strip()).first()
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found"
        )
    if not employee.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Employee is not active"
        )

    observations = (
        db.query(Observation)
        .filter(Observation.empleado_id == employee.id)
        .order_by(Observation.fecha_novedad.desc(), Observation.created_at.desc())
        .limit(settings.PUBLIC_HISTORY_LIMIT)
        .all()
    )

    return {
        "empleado": employee,
        "horarios": list_schedules(db, employee.id),
        "observaciones": observations,
    }
