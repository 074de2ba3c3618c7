from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import enum
from programador.db.session import Base


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "activo"
    INACTIVE = "inactivo"


class Employee(Base):
    __tablename__ = "empleados"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    cedula = Column(String(20), unique=True, nullable=False, index=True)
    nombre = Column(String(255), nullable=False)
    estado = Column(
        SQLEnum(EmployeeStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EmployeeStatus.ACTIVE,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    observaciones = relationship("Observation", back_populates="empleado", cascade="all, delete-orphan")
    horarios = relationship("WeekSchedule", back_populates="empleado", cascade="all, delete-orphan")
    banco_horas = relationship("BankEntry", back_populates="empleado", cascade="all, delete-orphan")

    @property
    def is_active(self) -> bool:
        return self.estado == EmployeeStatus.ACTIVE
