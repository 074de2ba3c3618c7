from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal, Optional, Union
from datetime import date, datetime
from programador.models.employee import EmployeeStatus
from programador.models.schedule import Visibility
from programador.models.bank_entry import BankStatus
from programador.services.segments import ReductionStyle


# ============= Employee Schemas =============
class EmployeeResponse(BaseModel):
    id: str
    cedula: str
    nombre: str
    estado: EmployeeStatus

    class Config:
        from_attributes = True


# ============= Schedule Schemas =============
class ScheduleCreate(BaseModel):
    empleado_id: str
    fecha_inicio: date
    fecha_fin: date
    working_weekdays: List[int]
    holiday_overrides: Dict[date, Literal["work", "skip"]] = Field(default_factory=dict)
    sunday_overrides: Dict[date, Literal["compensado", "sin-compensar"]] = Field(default_factory=dict)
    apply_banked_hours: bool = False
    reduced_weekday: Optional[Union[int, str]] = None
    tipo_jornada_reducida: Optional[ReductionStyle] = None
    creado_por: Optional[str] = None
    country_code: Optional[str] = None


class ScheduleEdit(BaseModel):
    # day label ("Martes"), ISO date or ISO weekday -> hours
    overrides: Dict[str, float] = Field(default_factory=dict)
    reduced_day: Optional[Union[int, str]] = None
    tipo_jornada_reducida: Optional[ReductionStyle] = None
    domingo_estado: Optional[Literal["compensado", "sin-compensar"]] = None


class ScheduleArchive(BaseModel):
    empleado_id: str


class BlockResponse(BaseModel):
    start: str
    end: str
    hours: float


class DayScheduleResponse(BaseModel):
    fecha: date
    descripcion: str
    horas: float
    horas_base: float
    horas_extra: float
    bloques: List[BlockResponse] = []
    jornada_entrada: Optional[str] = None
    jornada_salida: Optional[str] = None
    jornada_reducida: bool = False
    tipo_jornada_reducida: Optional[str] = None
    domingo_estado: Optional[str] = None
    es_festivo: bool = False
    festivo_trabajado: bool = False
    festivo_nombre: Optional[str] = None
    es_laborable: bool = False
    horas_reducidas_manualmente: bool = False
    horas_originales: Optional[float] = None
    horas_extra_reducidas: float = 0
    horas_legales_reducidas: float = 0
    banco_compensacion_id: Optional[str] = None
    bloqueado_por: List[str] = []

    class Config:
        from_attributes = True


class WeekScheduleResponse(BaseModel):
    id: str
    empleado_id: str
    fecha_inicio: date
    fecha_fin: date
    total_horas_semana: float
    creado_por: Optional[str] = None
    estado_visibilidad: Visibility
    dias: List[DayScheduleResponse]
    created_at: datetime

    class Config:
        from_attributes = True


# ============= Hours Bank Schemas =============
class BankEntryResponse(BaseModel):
    id: str
    empleado_id: str
    semana_inicio: date
    semana_fin: date
    horas_excedidas: float
    horas_pendientes: float
    estado: BankStatus
    semana_aplicada_inicio: Optional[date] = None
    semana_aplicada_fin: Optional[date] = None

    class Config:
        from_attributes = True


class BankApplicationItem(BaseModel):
    entry_id: str
    hours_consumed: float
    target_week_start: Optional[date] = None
    target_week_end: Optional[date] = None


class BankApply(BaseModel):
    applications: List[BankApplicationItem]


# ============= Observation Schemas =============
class ObservationCreate(BaseModel):
    empleado_id: str
    tipo_novedad: str = Field(..., min_length=1)
    observacion: Optional[str] = None
    fecha_novedad: Optional[date] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class ObservationResponse(BaseModel):
    id: str
    empleado_id: str
    tipo_novedad: str
    observacion: Optional[str] = None
    fecha_novedad: Optional[date] = None
    details: Dict[str, Any] = {}
    created_at: datetime

    class Config:
        from_attributes = True


class BlockingResponse(BaseModel):
    intervalos: List[Dict[str, Any]]
    por_fecha: Dict[str, List[Dict[str, Any]]]


# ============= Holiday Schemas =============
class HolidayCreate(BaseModel):
    fecha: date
    nombre: str = Field(..., min_length=1)
    descripcion: Optional[str] = None
    country_code: str = "CO"

    @field_validator('country_code', mode='before')
    @classmethod
    def validate_country_code(cls, v):
        if v is None or (isinstance(v, str) and v.strip() == ''):
            return "CO"
        v = str(v).strip().upper()
        if len(v) != 2 or not v.isalpha():
            raise ValueError("country_code must be a two-letter ISO code")
        return v


class HolidayBulkCreate(BaseModel):
    festivos: List[HolidayCreate] = Field(..., min_length=1)


class HolidayResponse(BaseModel):
    id: str
    country_code: str
    fecha: date
    nombre: str
    descripcion: Optional[str] = None

    class Config:
        from_attributes = True


# ============= Public Lookup Schemas =============
class PublicLookup(BaseModel):
    cedula: str = Field(..., min_length=1)


class PublicLookupResponse(BaseModel):
    empleado: EmployeeResponse
    horarios: List[WeekScheduleResponse]
    observaciones: List[ObservationResponse]
