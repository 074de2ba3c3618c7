import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from programador.main import app
from programador.db.session import Base, get_db
from programador.models.employee import Employee, EmployeeStatus
from programador.models.holiday import Holiday
from programador.models.observation import Observation

# In-memory database shared by every connection of one test
TEST_DATABASE_URL = "sqlite://"


@pytest.fixture
def db_session():
    """Create a fresh database for each test"""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(db_session):
    """Create test client with database override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def employee(db_session):
    """Active employee with no novedades"""
    employee = Employee(cedula="1012345678", nombre="Laura Gómez", estado=EmployeeStatus.ACTIVE)
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee


@pytest.fixture
def inactive_employee(db_session):
    employee = Employee(cedula="1034567890", nombre="Camila Torres", estado=EmployeeStatus.INACTIVE)
    db_session.add(employee)
    db_session.commit()
    db_session.refresh(employee)
    return employee


@pytest.fixture
def vacation(db_session, employee):
    """Vacaciones from 2025-01-10 to 2025-01-17 (return date 2025-01-18)"""
    observation = Observation(
        empleado_id=employee.id,
        tipo_novedad="Vacaciones",
        observacion="Vacaciones de enero",
        fecha_novedad=date(2025, 1, 2),
        details={
            "fecha_inicio_vacaciones": "2025-01-10",
            "fecha_regreso_vacaciones": "2025-01-18",
        },
    )
    db_session.add(observation)
    db_session.commit()
    db_session.refresh(observation)
    return observation


@pytest.fixture
def holiday(db_session):
    """Reyes Magos, Monday 2025-01-06"""
    holiday = Holiday(country_code="CO", fecha=date(2025, 1, 6), nombre="Día de los Reyes Magos")
    db_session.add(holiday)
    db_session.commit()
    db_session.refresh(holiday)
    return holiday
