"""
Observation Model

HR novedades attached to an employee. Only some types block scheduling
(see services/blocking.py); the rest are stored for reference.
"""

from sqlalchemy import Column, String, Date, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import uuid
from programador.db.session import Base


class Observation(Base):
    __tablename__ = "observaciones"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    empleado_id = Column(String(36), ForeignKey("empleados.id", ondelete="CASCADE"), nullable=False, index=True)
    tipo_novedad = Column(String(50), nullable=False)
    observacion = Column(Text, nullable=True)
    fecha_novedad = Column(Date, nullable=True)
    details = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    empleado = relationship("Employee", back_populates="observaciones")

    def to_raw(self) -> dict:
        """Plain record consumed by the blocking normalizer."""
        return {
            "id": self.id,
            "tipo_novedad": self.tipo_novedad,
            "observacion": self.observacion,
            "fecha_novedad": self.fecha_novedad,
            "details": self.details or {},
        }
