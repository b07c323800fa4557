"""
Tests for the application factory, health endpoint and catalog and user
administration endpoints.
"""

from fastapi.testclient import TestClient

API = "/api/v1"


class TestApplication:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["environment"] == "test"

    def test_request_id_is_propagated(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_is_generated(self, client: TestClient) -> None:
        assert client.get("/health").headers["X-Request-ID"]


class TestAuthEndpoints:
    def test_login_and_me(self, client: TestClient, manager_headers) -> None:
        response = client.get(f"{API}/auth/me", headers=manager_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["username"] == "mary_manager"
        assert body["role"] == "Manager"
        assert body["full_name"] == "Mary Manager"
        assert "password_hash" not in body

    def test_bad_credentials(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/auth/login", json={"username": "mary_manager", "password": "guess"}
        )
        assert response.status_code == 401

    def test_deactivated_user_token_is_refused(
        self, client: TestClient, admin_headers, sales_headers
    ) -> None:
        sales_id = client.get(f"{API}/auth/me", headers=sales_headers).json()["id"]
        client.post(f"{API}/users/{sales_id}/deactivate", headers=admin_headers)

        assert client.get(f"{API}/auth/me", headers=sales_headers).status_code == 403


class TestCatalogEndpoints:
    def test_list_customers(self, client: TestClient, sales_headers) -> None:
        customers = client.get(f"{API}/customers", headers=sales_headers).json()

        assert {c["name"] for c in customers} == {"John Doe", "ABC Corporation", "Market Vendor"}
        abc = next(c for c in customers if c["name"] == "ABC Corporation")
        assert [a["is_default"] for a in abc["addresses"]] == [True, False]

    def test_create_and_update_customer(self, client: TestClient, manager_headers) -> None:
        response = client.post(
            f"{API}/customers",
            json={
                "name": "Delta Traders",
                "email": "delta@example.com",
                "type": "wholesale",
                "addresses": [
                    {
                        "address": "5 Marina",
                        "city": "Lagos",
                        "state": "Lagos",
                        "postal_code": "101001",
                        "country": "Nigeria",
                    }
                ],
            },
            headers=manager_headers,
        )
        assert response.status_code == 201
        customer = response.json()
        assert customer["addresses"][0]["is_default"] is True

        response = client.patch(
            f"{API}/customers/{customer['id']}",
            json={"phone": "555-0199"},
            headers=manager_headers,
        )
        assert response.status_code == 200
        assert response.json()["last_modified_changes"] == "Phone"
        assert response.json()["last_modified_by"] == "Mary Manager"

    def test_sales_cannot_create_product(self, client: TestClient, sales_headers) -> None:
        response = client.post(
            f"{API}/products",
            json={
                "name": "Dock",
                "sku": "DOC-001",
                "base_price": "40",
                "retail_price": "70",
                "wholesale_price": "50",
                "open_market_price": "60",
            },
            headers=sales_headers,
        )
        assert response.status_code == 403

    def test_duplicate_sku_conflicts(self, client: TestClient, manager_headers) -> None:
        response = client.post(
            f"{API}/products",
            json={
                "name": "Laptop Copy",
                "sku": "LAP-001",
                "base_price": "1",
                "retail_price": "1",
                "wholesale_price": "1",
                "open_market_price": "1",
            },
            headers=manager_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"] == "Conflict"

    def test_update_product_price(self, client: TestClient, manager_headers) -> None:
        response = client.patch(
            f"{API}/products/2", json={"retail_price": "26.00"}, headers=manager_headers
        )
        assert response.status_code == 200
        assert float(response.json()["retail_price"]) == 26.0

    def test_vehicle_assignment(self, client: TestClient, manager_headers) -> None:
        response = client.post(
            f"{API}/vehicles/2/assign", json={"agent_id": 4}, headers=manager_headers
        )
        assert response.status_code == 200
        assert response.json()["assigned_agent_id"] == 4

        vehicles = client.get(f"{API}/vehicles", headers=manager_headers).json()
        assert {v["license_plate"]: v["assigned_agent_id"] for v in vehicles} == {
            "VAN-001": None,
            "TRK-101": 4,
        }

    def test_retired_vehicle_not_listed_as_active(self, client: TestClient, manager_headers) -> None:
        client.patch(f"{API}/vehicles/1", json={"status": "maintenance"}, headers=manager_headers)

        active = client.get(
            f"{API}/vehicles", params={"active_only": True}, headers=manager_headers
        ).json()
        assert [v["license_plate"] for v in active] == ["TRK-101"]


class TestUserEndpoints:
    def test_admin_manages_users(self, client: TestClient, admin_headers) -> None:
        response = client.post(
            f"{API}/users",
            json={
                "username": "ola_inventory",
                "email": "ola@company.com",
                "password": "stock2024",
                "role": "Inventory",
                "first_name": "Ola",
                "last_name": "Store",
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        user_id = response.json()["id"]

        response = client.patch(
            f"{API}/users/{user_id}", json={"department": "Warehouse"}, headers=admin_headers
        )
        assert response.json()["department"] == "Warehouse"

        assert client.delete(f"{API}/users/{user_id}", headers=admin_headers).status_code == 204
        usernames = [u["username"] for u in client.get(f"{API}/users", headers=admin_headers).json()]
        assert "ola_inventory" not in usernames

    def test_manager_cannot_list_users(self, client: TestClient, manager_headers) -> None:
        assert client.get(f"{API}/users", headers=manager_headers).status_code == 403

    def test_duplicate_username(self, client: TestClient, admin_headers) -> None:
        response = client.post(
            f"{API}/users",
            json={
                "username": "dave_agent",
                "email": "dave2@company.com",
                "password": "driver123",
                "role": "DeliveryAgent",
                "first_name": "Dave",
                "last_name": "Two",
            },
            headers=admin_headers,
        )
        assert response.status_code == 409
