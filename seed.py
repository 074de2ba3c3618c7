"""
Seed script to create demo employees and the Colombian holidays of 2025.
Run this after running migrations.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from datetime import date

from programador.db.session import SessionLocal
from programador.models.employee import Employee, EmployeeStatus
from programador.models.holiday import Holiday
from programador.models.observation import Observation


EMPLOYEES = [
    {"cedula": "1012345678", "nombre": "Laura Gómez", "estado": EmployeeStatus.ACTIVE},
    {"cedula": "1023456789", "nombre": "Andrés Rojas", "estado": EmployeeStatus.ACTIVE},
    {"cedula": "1034567890", "nombre": "Camila Torres", "estado": EmployeeStatus.INACTIVE},
]

HOLIDAYS_CO_2025 = [
    (date(2025, 1, 1), "Año Nuevo"),
    (date(2025, 1, 6), "Día de los Reyes Magos"),
    (date(2025, 3, 24), "Día de San José"),
    (date(2025, 4, 17), "Jueves Santo"),
    (date(2025, 4, 18), "Viernes Santo"),
    (date(2025, 5, 1), "Día del Trabajo"),
    (date(2025, 6, 2), "Día de la Ascensión"),
    (date(2025, 6, 23), "Corpus Christi"),
    (date(2025, 6, 30), "Sagrado Corazón / San Pedro y San Pablo"),
    (date(2025, 7, 20), "Día de la Independencia"),
    (date(2025, 8, 7), "Batalla de Boyacá"),
    (date(2025, 8, 18), "La Asunción de la Virgen"),
    (date(2025, 10, 13), "Día de la Raza"),
    (date(2025, 11, 3), "Todos los Santos"),
    (date(2025, 11, 17), "Independencia de Cartagena"),
    (date(2025, 12, 8), "Día de la Inmaculada Concepción"),
    (date(2025, 12, 25), "Navidad"),
]


def seed_database():
    db = SessionLocal()

    try:
        for data in EMPLOYEES:
            existing = db.query(Employee).filter(Employee.cedula == data["cedula"]).first()
            if not existing:
                db.add(Employee(**data))
                print(f"✓ Created employee: {data['nombre']} ({data['cedula']})")
            else:
                print(f"✓ Employee {data['cedula']} already exists")
        db.flush()

        for fecha, nombre in HOLIDAYS_CO_2025:
            existing = db.query(Holiday).filter(Holiday.country_code == "CO", Holiday.fecha == fecha).first()
            if not existing:
                db.add(Holiday(country_code="CO", fecha=fecha, nombre=nombre))
        print(f"✓ Loaded {len(HOLIDAYS_CO_2025)} holidays for CO 2025")

        laura = db.query(Employee).filter(Employee.cedula == "1012345678").first()
        if not db.query(Observation).filter(Observation.empleado_id == laura.id).first():
            db.add(Observation(
                empleado_id=laura.id,
                tipo_novedad="Vacaciones",
                observacion="Vacaciones de mitad de año",
                fecha_novedad=date(2025, 6, 16),
                details={
                    "fecha_inicio_vacaciones": "2025-07-07",
                    "fecha_regreso_vacaciones": "2025-07-21",
                },
            ))
            db.add(Observation(
                empleado_id=laura.id,
                tipo_novedad="Estudio",
                observacion="Clases nocturnas",
                fecha_novedad=date(2025, 2, 1),
                details={
                    "fecha_inicio": "2025-02-03",
                    "fecha_fin": "2025-05-30",
                    "dias_estudio": [{"dia": 3, "inicio": "16:00", "fin": "18:00"}],
                },
            ))
            print("✓ Created sample novedades for Laura Gómez")

        db.commit()
        print("\n✅ Database seeded successfully!")

    except Exception as e:
        print(f"❌ Error seeding database: {e}")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    print("🌱 Seeding database...")
    seed_database()
