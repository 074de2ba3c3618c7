"""
Holiday Model

National holidays per country. Generation asks whether each holiday that
lands on a working weekday is worked or skipped.
"""

from sqlalchemy import Column, String, Date, DateTime, UniqueConstraint
import uuid
from datetime import datetime

from programador.db.session import Base


class Holiday(Base):
    """Holiday model keyed by country code and date"""

    __tablename__ = "festivos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    country_code = Column(String(2), nullable=False, default="CO")
    fecha = Column(Date, nullable=False, index=True)
    nombre = Column(String(255), nullable=False)
    descripcion = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('country_code', 'fecha', name='uq_festivo_country_fecha'),
    )

    def __repr__(self):
        return f"<Holiday(date={self.fecha}, name={self.nombre})>"
