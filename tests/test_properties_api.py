"""Tests for property endpoints: creation, access, sharing and summaries."""

from decimal import Decimal

import pytest


@pytest.fixture
def beach_house(client, auth_headers):
    """A simple-mode property owned by the default host."""
    response = client.post(
        "/api/properties/",
        json={
            "display_name": "Beach House",
            "city": "Ubatuba",
            "state": "SP",
            "tariff": "1,10",
            "settlement_mode": "simple",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


# =============================================================================
# Create and read
# =============================================================================


class TestCreateProperty:
    """Tests for POST /api/properties/."""

    def test_comma_tariff(self, beach_house):
        """A tariff typed with a decimal comma is stored as a decimal."""
        assert Decimal(beach_house["tariff"]) == Decimal("1.10")
        assert beach_house["settlement_mode"] == "simple"
        assert beach_house["is_active"] is True

    def test_defaults(self, client, auth_headers):
        """Tariff and mode fall back to the configured defaults."""
        response = client.post(
            "/api/properties/", json={"display_name": "Loft"}, headers=auth_headers
        )
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["tariff"]) == Decimal("0.75")
        assert data["settlement_mode"] == "monitoring"

    @pytest.mark.parametrize(
        "payload",
        [
            {"display_name": "   "},
            {"display_name": "Loft", "tariff": "0"},
            {"display_name": "Loft", "tariff": "cheap"},
            {"display_name": "Loft", "settlement_mode": "hybrid"},
            {"display_name": "Loft", "state": "SPX"},
        ],
    )
    def test_validation(self, client, auth_headers, payload):
        """Invalid properties are rejected."""
        response = client.post("/api/properties/", json=payload, headers=auth_headers)
        assert response.status_code == 422

    def test_requires_login(self, client):
        """Anonymous hosts cannot create properties."""
        response = client.post("/api/properties/", json={"display_name": "Loft"})
        assert response.status_code == 401


class TestPropertyAccess:
    """Hosts only see their own or shared properties."""

    def test_list_own(self, client, auth_headers, beach_house):
        response = client.get("/api/properties/", headers=auth_headers)
        assert [p["id"] for p in response.json()] == [beach_house["id"]]

    def test_other_host_sees_nothing(self, client, login_as, beach_house):
        """Another host gets an empty list and a 404."""
        other = login_as("neighbor")
        assert client.get("/api/properties/", headers=other).json() == []
        response = client.get(f"/api/properties/{beach_house['id']}", headers=other)
        assert response.status_code == 404

    def test_update(self, client, auth_headers, beach_house):
        """Tariff and mode can be changed."""
        response = client.patch(
            f"/api/properties/{beach_house['id']}",
            json={"tariff": "0.95", "settlement_mode": "monitoring"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert Decimal(response.json()["tariff"]) == Decimal("0.95")
        assert response.json()["settlement_mode"] == "monitoring"

    def test_soft_delete(self, client, auth_headers, beach_house):
        """Deleted properties are hidden from the default listing."""
        response = client.delete(f"/api/properties/{beach_house['id']}", headers=auth_headers)
        assert response.status_code == 204
        assert client.get("/api/properties/", headers=auth_headers).json() == []
        listed = client.get("/api/properties/?active_only=false", headers=auth_headers).json()
        assert listed[0]["is_active"] is False


class TestShareProperty:
    """Tests for POST /api/properties/{id}/share."""

    def test_share(self, client, auth_headers, login_as, beach_house):
        """A shared property becomes visible to the other host."""
        cohost = login_as("cohost")
        response = client.post(
            f"/api/properties/{beach_house['id']}/share",
            json={"username": "cohost"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        listed = client.get("/api/properties/", headers=cohost).json()
        assert [p["id"] for p in listed] == [beach_house["id"]]

    def test_only_owner_shares_and_deletes(self, client, auth_headers, login_as, beach_house):
        """Co-hosts cannot reshare or delete."""
        cohost = login_as("cohost")
        login_as("third")
        client.post(
            f"/api/properties/{beach_house['id']}/share",
            json={"username": "cohost"},
            headers=auth_headers,
        )
        response = client.post(
            f"/api/properties/{beach_house['id']}/share",
            json={"username": "third"},
            headers=cohost,
        )
        assert response.status_code == 403
        response = client.delete(f"/api/properties/{beach_house['id']}", headers=cohost)
        assert response.status_code == 403

    def test_unknown_user(self, client, auth_headers, beach_house):
        response = client.post(
            f"/api/properties/{beach_house['id']}/share",
            json={"username": "nobody"},
            headers=auth_headers,
        )
        assert response.status_code == 404


class TestPropertySummary:
    """Tests for GET /api/properties/{id}/summary."""

    def _settled_stay(self, client, headers, property_id, guest):
        stay = client.post(
            f"/api/properties/{property_id}/stays",
            json={
                "guest_name": guest,
                "check_in_date": "2024-01-01",
                "entry": {"code03_entry": "100", "code103_entry": "20"},
            },
            headers=headers,
        ).json()
        response = client.put(
            f"/api/stays/{stay['id']}/exit",
            json={"check_out_date": "2024-01-05", "code03_exit": "150", "code103_exit": "35"},
            headers=headers,
        )
        assert response.status_code == 200
        return stay["id"]

    def test_empty(self, client, auth_headers, beach_house):
        response = client.get(f"/api/properties/{beach_house['id']}/summary", headers=auth_headers)
        data = response.json()
        assert data["total_stays"] == 0
        assert Decimal(data["received_revenue"]) == 0

    def test_revenue_split(self, client, auth_headers, beach_house):
        """Paid charges are received; completed ones are pending."""
        paid_id = self._settled_stay(client, auth_headers, beach_house["id"], "Ana")
        self._settled_stay(client, auth_headers, beach_house["id"], "Bruno")
        client.post(
            f"/api/properties/{beach_house['id']}/stays",
            json={"guest_name": "Carla", "check_in_date": "2024-02-01"},
            headers=auth_headers,
        )
        client.post(f"/api/stays/{paid_id}/paid", headers=auth_headers)

        data = client.get(
            f"/api/properties/{beach_house['id']}/summary", headers=auth_headers
        ).json()
        assert data["total_stays"] == 3
        assert data["open_stays"] == 2
        assert Decimal(data["received_revenue"]) == Decimal("71.50")
        assert Decimal(data["pending_revenue"]) == Decimal("71.50")
