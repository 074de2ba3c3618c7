from fastapi import status


class TestHolidayLookup:
    """Test the holiday range endpoint"""

    def test_holidays_in_range(self, client, holiday):
        response = client.get("/festivos", params={"start": "2025-01-01", "end": "2025-01-31"})
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [(h["fecha"], h["nombre"]) for h in data] == [("2025-01-06", "Día de los Reyes Magos")]

    def test_other_country_is_empty(self, client, holiday):
        response = client.get("/festivos", params={"start": "2025-01-01", "end": "2025-01-31", "country": "mx"})
        assert response.json() == []

    def test_start_after_end(self, client):
        response = client.get("/festivos", params={"start": "2025-02-01", "end": "2025-01-01"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestHolidayAdmin:
    """Test holiday maintenance endpoints"""

    def test_create_holiday(self, client):
        response = client.post("/admin/festivos", json={
            "fecha": "2025-07-20",
            "nombre": "Día de la Independencia",
            "country_code": "co",
        })
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["country_code"] == "CO"

    def test_duplicate_holiday(self, client, holiday):
        response = client.post("/admin/festivos", json={"fecha": "2025-01-06", "nombre": "Reyes"})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_country_code(self, client):
        response = client.post("/admin/festivos", json={
            "fecha": "2025-07-20",
            "nombre": "Independencia",
            "country_code": "COL",
        })
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_bulk_skips_duplicates(self, client, holiday):
        response = client.post("/admin/festivos/bulk", json={"festivos": [
            {"fecha": "2025-01-06", "nombre": "Reyes"},
            {"fecha": "2025-03-24", "nombre": "Día de San José"},
            {"fecha": "2025-03-24", "nombre": "Día de San José"},
        ]})
        assert response.status_code == status.HTTP_201_CREATED
        assert [h["fecha"] for h in response.json()] == ["2025-03-24"]

    def test_bulk_fails_on_duplicates_when_asked(self, client, holiday):
        response = client.post(
            "/admin/festivos/bulk",
            params={"skip_duplicates": False},
            json={"festivos": [
                {"fecha": "2025-03-24", "nombre": "Día de San José"},
                {"fecha": "2025-01-06", "nombre": "Reyes"},
            ]},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        listed = client.get("/admin/festivos", params={"year": 2025}).json()
        assert [h["fecha"] for h in listed] == ["2025-01-06"]

    def test_list_by_month(self, client, holiday):
        client.post("/admin/festivos", json={"fecha": "2025-03-24", "nombre": "Día de San José"})
        response = client.get("/admin/festivos", params={"year": 2025, "month": 3})
        assert [h["nombre"] for h in response.json()] == ["Día de San José"]

    def test_check_holiday(self, client, holiday):
        response = client.get("/admin/festivos/check/2025-01-06")
        assert response.json()["es_festivo"] is True
        assert response.json()["nombre"] == "Día de los Reyes Magos"

        response = client.get("/admin/festivos/check/2025-01-07")
        assert response.json()["es_festivo"] is False

    def test_delete_holiday(self, client, holiday):
        response = client.delete(f"/admin/festivos/{holiday.id}")
        assert response.status_code == status.HTTP_204_NO_CONTENT
        response = client.delete(f"/admin/festivos/{holiday.id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND
