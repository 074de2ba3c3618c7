from sqlalchemy import Column, String, Date, DateTime, Float, Boolean, ForeignKey, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import enum
from programador.db.session import Base


class Visibility(str, enum.Enum):
    PUBLIC = "publico"
    ARCHIVED = "archivado"


class WeekSchedule(Base):
    __tablename__ = "horarios"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    empleado_id = Column(String(36), ForeignKey("empleados.id", ondelete="CASCADE"), nullable=False, index=True)
    fecha_inicio = Column(Date, nullable=False, index=True)
    fecha_fin = Column(Date, nullable=False)
    total_horas_semana = Column(Float, nullable=False, default=0)
    creado_por = Column(String(255), nullable=True)
    estado_visibilidad = Column(
        SQLEnum(Visibility, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Visibility.PUBLIC,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    empleado = relationship("Employee", back_populates="horarios")
    dias = relationship(
        "DaySchedule", back_populates="horario", cascade="all, delete-orphan", order_by="DaySchedule.fecha"
    )


class DaySchedule(Base):
    __tablename__ = "horario_dias"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    horario_id = Column(String(36), ForeignKey("horarios.id", ondelete="CASCADE"), nullable=False, index=True)
    fecha = Column(Date, nullable=False)
    descripcion = Column(String(20), nullable=False)
    horas = Column(Float, nullable=False, default=0)
    horas_base = Column(Float, nullable=False, default=0)
    horas_extra = Column(Float, nullable=False, default=0)
    bloques = Column(JSON, nullable=False, default=list)
    jornada_entrada = Column(String(5), nullable=True)
    jornada_salida = Column(String(5), nullable=True)
    jornada_reducida = Column(Boolean, default=False, nullable=False)
    tipo_jornada_reducida = Column(String(20), nullable=True)
    domingo_estado = Column(String(20), nullable=True)
    es_festivo = Column(Boolean, default=False, nullable=False)
    festivo_trabajado = Column(Boolean, default=False, nullable=False)
    festivo_nombre = Column(String(255), nullable=True)
    es_laborable = Column(Boolean, default=False, nullable=False)
    horas_reducidas_manualmente = Column(Boolean, default=False, nullable=False)
    horas_originales = Column(Float, nullable=True)
    horas_extra_reducidas = Column(Float, nullable=False, default=0)
    horas_legales_reducidas = Column(Float, nullable=False, default=0)
    banco_compensacion_id = Column(String(36), ForeignKey("horas_compensacion.id"), nullable=True)
    bloqueado_por = Column(JSON, nullable=False, default=list)

    # Relationships
    horario = relationship("WeekSchedule", back_populates="dias")

    def to_dict(self) -> dict:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}
