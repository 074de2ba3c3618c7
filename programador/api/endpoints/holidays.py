"""
Holiday Endpoints

Public holiday lookup used by the schedule screen, plus the admin endpoints
that maintain the holiday table per country.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from sqlalchemy import extract
from typing import List, Optional
from datetime import date
import logging

from programador.core.config import settings
from programador.db.session import get_db
from programador.models.holiday import Holiday
from programador.schemas import HolidayCreate, HolidayResponse, HolidayBulkCreate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/festivos", tags=["holidays"])
admin_router = APIRouter(prefix="/admin/festivos", tags=["admin", "holidays"])


@router.get("", response_model=List[HolidayResponse])
def holidays_in_range(
    start: date = Query(..., description="First date (inclusive)"),
    end: date = Query(..., description="Last date (inclusive)"),
    country: Optional[str] = Query(None, min_length=2, max_length=2),
    db: Session = Depends(get_db)
):
    """Holidays of a country between two dates."""
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start must not be after end"
        )

    country_code = (country or settings.HOLIDAY_COUNTRY_CODE).upper()
    return db.query(Holiday).filter(
        Holiday.country_code == country_code,
        Holiday.fecha >= start,
        Holiday.fecha <= end
    ).order_by(Holiday.fecha.asc()).all()


@admin_router.get("", response_model=List[HolidayResponse])
def list_holidays(
    year: Optional[int] = Query(None, description="Filter by year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Filter by month (1-12)"),
    country: Optional[str] = Query(None, min_length=2, max_length=2),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """
    List holidays with optional filtering.

    - **year**: Filter holidays by year
    - **month**: Filter holidays by month (1-12)
    - **country**: Two-letter country code
    """
    query = db.query(Holiday)

    if year is not None:
        query = query.filter(extract('year', Holiday.fecha) == year)

    if month is not None:
        query = query.filter(extract('month', Holiday.fecha) == month)

    if country is not None:
        query = query.filter(Holiday.country_code == country.upper())

    return query.order_by(Holiday.fecha.asc()).offset(skip).limit(limit).all()


def _existing(db: Session, holiday_data: HolidayCreate) -> Optional[Holiday]:
    return db.query(Holiday).filter(
        Holiday.country_code == holiday_data.country_code,
        Holiday.fecha == holiday_data.fecha
    ).first()


@admin_router.post("", response_model=HolidayResponse, status_code=status.HTTP_201_CREATED)
def create_holiday(holiday_data: HolidayCreate, db: Session = Depends(get_db)):
    existing = _existing(db, holiday_data)
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A holiday already exists on {holiday_data.fecha}: {existing.nombre}"
        )

    holiday = Holiday(
        country_code=holiday_data.country_code,
        fecha=holiday_data.fecha,
        nombre=holiday_data.nombre,
        descripcion=holiday_data.descripcion
    )

    db.add(holiday)
    db.commit()
    db.refresh(holiday)

    return holiday


@admin_router.post("/bulk", response_model=List[HolidayResponse], status_code=status.HTTP_201_CREATED)
def create_holidays_bulk(
    bulk_data: HolidayBulkCreate,
    skip_duplicates: bool = Query(True, description="Skip duplicate dates instead of failing"),
    db: Session = Depends(get_db)
):
    """
    Create several holidays at once.

    - **skip_duplicates**: If True, skip existing dates; if False, fail on duplicates
    """
    created_holidays = []
    seen = set()

    for holiday_data in bulk_data.festivos:
        key = (holiday_data.country_code, holiday_data.fecha)
        existing = _existing(db, holiday_data)

        if existing or key in seen:
            if skip_duplicates:
                logger.info("Skipping duplicate holiday %s %s", *key)
                continue
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Holiday already exists on {holiday_data.fecha}"
            )

        seen.add(key)
        holiday = Holiday(
            country_code=holiday_data.country_code,
            fecha=holiday_data.fecha,
            nombre=holiday_data.nombre,
            descripcion=holiday_data.descripcion
        )
        db.add(holiday)
        created_holidays.append(holiday)

    if created_holidays:
        db.commit()
        for holiday in created_holidays:
            db.refresh(holiday)

    return created_holidays


@admin_router.delete("/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_holiday(holiday_id: str, db: Session = Depends(get_db)):
    holiday = db.query(Holiday).filter(Holiday.id == holiday_id).first()
    if not holiday:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Holiday not found"
        )

    db.delete(holiday)
    db.commit()

    return None


@admin_router.get("/check/{check_date}", response_model=dict)
def check_holiday(
    check_date: date,
    country: Optional[str] = Query(None, min_length=2, max_length=2),
    db: Session = Depends(get_db)
):
    """Whether a date is a holiday in the given (or default) country."""
    country_code = (country or settings.HOLIDAY_COUNTRY_CODE).upper()
    holiday = db.query(Holiday).filter(
        Holiday.country_code == country_code,
        Holiday.fecha == check_date
    ).first()

    if holiday:
        return {
            "es_festivo": True,
            "nombre": holiday.nombre,
            "message": f"{check_date} is a holiday: {holiday.nombre}"
        }

    return {
        "es_festivo": False,
        "nombre": None,
        "message": f"{check_date} is not a holiday"
    }
