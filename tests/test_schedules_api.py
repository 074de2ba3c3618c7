import pytest
from fastapi import status
from datetime import date

from programador.models.bank_entry import BankEntry, BankStatus
from programador.models.schedule import WeekSchedule


def create_payload(employee, **overrides):
    payload = {
        "empleado_id": employee.id,
        "fecha_inicio": "2025-01-06",
        "fecha_fin": "2025-01-12",
        "working_weekdays": [1, 2, 3, 4, 5, 6],
        "creado_por": "coordinacion@empresa.co",
    }
    payload.update(overrides)
    return payload


class TestCreateSchedule:
    """Test schedule generation endpoint"""

    def test_create_one_week(self, client, employee):
        response = client.post("/horarios", json=create_payload(employee))
        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert len(data) == 1
        week = data[0]
        assert week["total_horas_semana"] == 56
        assert week["estado_visibilidad"] == "publico"
        assert week["creado_por"] == "coordinacion@empresa.co"
        assert [d["horas"] for d in week["dias"]] == [10, 10, 10, 10, 10, 6, 0]
        assert week["dias"][0]["bloques"][0]["start"] == "2025-01-06T07:00:00"

    def test_unknown_employee(self, client):
        response = client.post("/horarios", json={
            "empleado_id": "missing",
            "fecha_inicio": "2025-01-06",
            "fecha_fin": "2025-01-12",
            "working_weekdays": [1, 2, 3, 4, 5],
        })
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["error"] == "not_found"

    def test_start_after_end(self, client, employee):
        response = client.post("/horarios", json=create_payload(employee, fecha_inicio="2025-01-13"))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"]["error"] == "validation_error"

    def test_undecided_holiday_cancels(self, client, employee, holiday):
        response = client.post("/horarios", json=create_payload(employee))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        detail = response.json()["detail"]
        assert detail["error"] == "cancelled"
        assert detail["fecha"] == "2025-01-06"

    def test_worked_holiday(self, client, employee, holiday):
        response = client.post(
            "/horarios",
            json=create_payload(employee, holiday_overrides={"2025-01-06": "work"}),
        )
        assert response.status_code == status.HTTP_201_CREATED
        monday = response.json()[0]["dias"][0]
        assert monday["horas"] == 6
        assert monday["festivo_trabajado"] is True
        assert monday["festivo_nombre"] == "Día de los Reyes Magos"

    def test_vacation_conflict_stores_nothing(self, client, employee, vacation, db_session):
        response = client.post(
            "/horarios",
            json=create_payload(employee, fecha_inicio="2025-01-01", fecha_fin="2025-01-31"),
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        bloqueos = response.json()["detail"]["bloqueos"]
        assert bloqueos[0]["tipo"] == "Vacaciones"
        assert bloqueos[0]["fecha_inicio"] == "2025-01-10"
        assert bloqueos[0]["fecha_fin"] == "2025-01-17"
        assert "2025-01-12" not in bloqueos[0]["fechas"]
        assert db_session.query(WeekSchedule).count() == 0

    def test_sunday_override(self, client, employee):
        response = client.post(
            "/horarios",
            json=create_payload(employee, sunday_overrides={"2025-01-12": "compensado"}),
        )
        assert response.json()[0]["dias"][6]["domingo_estado"] == "compensado"

    def test_reduced_weekday(self, client, employee):
        response = client.post(
            "/horarios",
            json=create_payload(employee, reduced_weekday="Viernes", tipo_jornada_reducida="entrar-tarde"),
        )
        friday = response.json()[0]["dias"][4]
        assert friday["jornada_reducida"] is True
        assert friday["tipo_jornada_reducida"] == "entrar-tarde"
        assert friday["jornada_entrada"] == "08:00"

    def test_banked_hours_are_debited(self, client, employee, db_session):
        entry = BankEntry(
            empleado_id=employee.id,
            semana_inicio=date(2024, 12, 30),
            semana_fin=date(2025, 1, 5),
            horas_excedidas=5,
            horas_pendientes=5,
        )
        db_session.add(entry)
        db_session.commit()

        response = client.post("/horarios", json=create_payload(employee, apply_banked_hours=True))
        assert response.status_code == status.HTTP_201_CREATED
        week = response.json()[0]
        assert week["total_horas_semana"] == 51
        monday = week["dias"][0]
        assert monday["horas"] == 8
        assert monday["horas_extra_reducidas"] == 2
        assert monday["banco_compensacion_id"] == entry.id
        assert week["dias"][3]["banco_compensacion_id"] is None

        db_session.refresh(entry)
        assert entry.horas_pendientes == 0
        assert entry.estado == BankStatus.APPLIED


class TestListAndArchive:

    def test_regeneration_archives_previous_weeks(self, client, employee):
        client.post("/horarios", json=create_payload(employee))
        client.post("/horarios", json=create_payload(employee, fecha_inicio="2025-01-13", fecha_fin="2025-01-19"))

        public = client.get(f"/horarios/{employee.id}").json()
        assert [w["fecha_inicio"] for w in public] == ["2025-01-13"]

        everything = client.get(f"/horarios/{employee.id}", params={"incluir_archivados": True}).json()
        assert [w["fecha_inicio"] for w in everything] == ["2025-01-06", "2025-01-13"]
        assert everything[0]["estado_visibilidad"] == "archivado"

    def test_archive_endpoint(self, client, employee):
        client.post("/horarios", json=create_payload(employee))
        response = client.patch("/horarios/archivar", json={"empleado_id": employee.id})
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"archivados": 1}
        assert client.get(f"/horarios/{employee.id}").json() == []

    def test_list_unknown_employee(self, client):
        response = client.get("/horarios/missing")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_schedule(self, client, employee):
        week_id = client.post("/horarios", json=create_payload(employee)).json()[0]["id"]
        response = client.delete(f"/horarios/{week_id}")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(f"/horarios/{employee.id}").json() == []

    def test_delete_unknown_schedule(self, client):
        response = client.delete("/horarios/missing")
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestEditSchedule:

    @pytest.fixture
    def week_id(self, client, employee):
        return client.post("/horarios", json=create_payload(employee)).json()[0]["id"]

    def test_raise_tuesday_records_excess(self, client, employee, week_id):
        response = client.patch(f"/horarios/{week_id}", json={"overrides": {"Martes": 12}})
        assert response.status_code == status.HTTP_200_OK
        week = response.json()
        assert week["total_horas_semana"] == 58
        tuesday = week["dias"][1]
        assert tuesday["horas"] == 12
        assert tuesday["horas_originales"] == 10
        assert tuesday["horas_reducidas_manualmente"] is False

        pending = client.get(f"/horas-compensacion/{employee.id}/pending").json()
        assert [(e["horas_excedidas"], e["horas_pendientes"]) for e in pending] == [(2, 2)]

    def test_second_edit_replaces_the_entry(self, client, employee, week_id):
        client.patch(f"/horarios/{week_id}", json={"overrides": {"Martes": 12}})
        client.patch(f"/horarios/{week_id}", json={"overrides": {"Martes": 13}})

        pending = client.get(f"/horas-compensacion/{employee.id}/pending").json()
        assert [e["horas_pendientes"] for e in pending] == [3]
        history = client.get(f"/horas-compensacion/{employee.id}/history").json()
        assert sorted(e["estado"] for e in history) == ["anulado", "pendiente"]

    def test_ledger_after_two_edits(self, client, employee, week_id, db_session):
        client.patch(f"/horarios/{week_id}", json={"overrides": {"Martes": 12}})
        response = client.patch(f"/horarios/{week_id}", json={"overrides": {"Martes": 13}})
        assert response.json()["total_horas_semana"] == 59

        db_session.expire_all()
        ledger = db_session.query(BankEntry).order_by(BankEntry.horas_excedidas.asc()).all()
        assert [(e.estado, e.horas_excedidas, e.horas_pendientes) for e in ledger] == [
            (BankStatus.ANNULLED, 2, 0),
            (BankStatus.PENDING, 3, 3),
        ]

    def test_day_set_to_zero_is_accepted(self, client, employee, week_id):
        response = client.patch(f"/horarios/{week_id}", json={"overrides": {"Lunes": 0}})
        assert response.status_code == status.HTTP_200_OK
        week = response.json()
        assert [d["horas"] for d in week["dias"]] == [0, 10, 10, 10, 10, 7, 0]
        assert sum(d["horas_base"] for d in week["dias"]) == 36
        assert sum(d["horas_extra"] for d in week["dias"]) == 11
        assert week["dias"][0]["horas_reducidas_manualmente"] is True
        assert client.get(f"/horas-compensacion/{employee.id}/pending").json() == []

    def test_blocked_day_cannot_take_the_reduced_schedule(self, client, employee, week_id):
        client.post("/observaciones", json={
            "empleado_id": employee.id,
            "tipo_novedad": "Incapacidades",
            "details": {"fecha_inicio": "2025-01-08", "duracion_dias": 1},
        })
        response = client.patch(f"/horarios/{week_id}", json={"reduced_day": "Miércoles"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_edit_back_to_56_annuls_the_excess(self, client, employee, week_id):
        client.patch(f"/horarios/{week_id}", json={"overrides": {"Martes": 12}})
        client.patch(f"/horarios/{week_id}", json={"overrides": {"Martes": 10}})
        assert client.get(f"/horas-compensacion/{employee.id}/pending").json() == []

    def test_move_reduced_day_and_sunday_status(self, client, week_id):
        response = client.patch(
            f"/horarios/{week_id}",
            json={"reduced_day": "Miércoles", "domingo_estado": "sin-compensar"},
        )
        days = response.json()["dias"]
        assert days[2]["jornada_reducida"] is True
        assert days[2]["horas"] == 9
        assert days[6]["domingo_estado"] == "sin-compensar"

    def test_negative_hours(self, client, week_id):
        response = client.patch(f"/horarios/{week_id}", json={"overrides": {"Lunes": -2}})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_capacity_violation(self, client, week_id):
        response = client.patch(f"/horarios/{week_id}", json={"overrides": {"Lunes": 4}})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        detail = response.json()["detail"]
        assert detail["error"] == "capacity_exceeded"
        assert detail["rule"] == "extra_requires_full_legal"

    def test_rejected_edit_keeps_stored_week(self, client, employee, week_id):
        client.patch(f"/horarios/{week_id}", json={"overrides": {"Lunes": 4}})
        week = client.get(f"/horarios/{employee.id}").json()[0]
        assert week["dias"][0]["horas"] == 10
        assert week["total_horas_semana"] == 56

    def test_new_blocking_observation_conflicts_on_edit(self, client, employee, week_id):
        client.post("/observaciones", json={
            "empleado_id": employee.id,
            "tipo_novedad": "Incapacidades",
            "details": {"fecha_inicio": "2025-01-08", "duracion_dias": 1},
        })
        response = client.patch(f"/horarios/{week_id}", json={"overrides": {"Miércoles": 8}})
        assert response.status_code == status.HTTP_409_CONFLICT
        bloqueos = response.json()["detail"]["bloqueos"]
        assert bloqueos == [{"fecha": "2025-01-08", "descripcion": "Miércoles", "tipos": ["Incapacidades"], "horas": 8}]

    def test_edit_unknown_schedule(self, client):
        response = client.patch("/horarios/missing", json={"overrides": {}})
        assert response.status_code == status.HTTP_404_NOT_FOUND
