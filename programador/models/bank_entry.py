"""
Bank Entry Model

One ledger row per employee and week whose total went over the combined
weekly ceiling. Rows are never deleted, only annulled.
"""

from sqlalchemy import Column, String, Date, DateTime, Float, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
import enum
from programador.db.session import Base


class BankStatus(str, enum.Enum):
    PENDING = "pendiente"
    PARTIAL = "parcial"
    APPLIED = "aplicado"
    ANNULLED = "anulado"


class BankEntry(Base):
    __tablename__ = "horas_compensacion"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    empleado_id = Column(String(36), ForeignKey("empleados.id", ondelete="CASCADE"), nullable=False, index=True)
    semana_inicio = Column(Date, nullable=False, index=True)
    semana_fin = Column(Date, nullable=False)
    horas_excedidas = Column(Float, nullable=False, default=0)
    horas_pendientes = Column(Float, nullable=False, default=0)
    estado = Column(
        SQLEnum(BankStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BankStatus.PENDING,
    )
    semana_aplicada_inicio = Column(Date, nullable=True)
    semana_aplicada_fin = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    empleado = relationship("Employee", back_populates="banco_horas")

    def __repr__(self):
        return f"<BankEntry(week={self.semana_inicio}, pending={self.horas_pendientes}, status={self.estado})>"
