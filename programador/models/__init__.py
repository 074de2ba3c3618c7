# Import all models here for Alembic to detect them
from programador.models.employee import Employee, EmployeeStatus
from programador.models.observation import Observation
from programador.models.schedule import WeekSchedule, DaySchedule, Visibility
from programador.models.bank_entry import BankEntry, BankStatus
from programador.models.holiday import Holiday

__all__ = [
    "Employee",
    "EmployeeStatus",
    "Observation",
    "WeekSchedule",
    "DaySchedule",
    "Visibility",
    "BankEntry",
    "BankStatus",
    "Holiday",
]
