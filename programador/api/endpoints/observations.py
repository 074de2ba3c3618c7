from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from programador.db.session import get_db
from programador.models.observation import Observation
from programador.schemas import ObservationCreate, ObservationResponse, BlockingResponse
from programador.services.schedules import get_employee, load_calendar

router = APIRouter(prefix="/observaciones", tags=["Observations"])


@router.get("/{empleado_id}", response_model=List[ObservationResponse])
def list_observations(empleado_id: str, db: Session = Depends(get_db)):
    get_employee(db, empleado_id)
    return (
        db.query(Observation)
        .filter(Observation.empleado_id == empleado_id)
        .order_by(Observation.fecha_novedad.desc(), Observation.created_at.desc())
        .all()
    )


@router.post("", response_model=ObservationResponse, status_code=status.HTTP_201_CREATED)
def create_observation(payload: ObservationCreate, db: Session = Depends(get_db)):
    get_employee(db, payload.empleado_id)

    observation = Observation(
        empleado_id=payload.empleado_id,
        tipo_novedad=payload.tipo_novedad,
        observacion=payload.observacion,
        fecha_novedad=payload.fecha_novedad,
        details=payload.details,
    )

    db.add(observation)
    db.commit()
    db.refresh(observation)

    return observation


@router.delete("/{observation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_observation(observation_id: str, db: Session = Depends(get_db)):
    observation = db.query(Observation).filter(Observation.id == observation_id).first()
    if not observation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Observation not found"
        )

    db.delete(observation)
    db.commit()

    return None


@router.get("/{empleado_id}/bloqueos", response_model=BlockingResponse)
def list_blocking(empleado_id: str, db: Session = Depends(get_db)):
    """Normalized blocking intervals of an employee and the dates they cover."""
    get_employee(db, empleado_id)
    calendar = load_calendar(db, empleado_id)
    return {
        "intervalos": [interval.to_dict() for interval in calendar.intervals],
        "por_fecha": calendar.index_as_dict(),
    }
