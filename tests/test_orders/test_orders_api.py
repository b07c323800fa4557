"""
Tests for the order API endpoints.

Covers the full fulfillment workflow over HTTP and the mapping of service
errors to status codes.
"""

from fastapi.testclient import TestClient

ORDERS = "/api/v1/orders"


def place_wholesale_order(client: TestClient, headers: dict[str, str]) -> dict:
    response = client.post(
        ORDERS,
        json={"customer_id": 2, "line_items": [{"product_id": 1, "quantity": 2}]},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestOrderWorkflow:
    def test_create_order(self, client: TestClient, sales_headers) -> None:
        order = place_wholesale_order(client, sales_headers)

        assert order["status"] == "pending"
        assert order["customer_name"] == "ABC Corporation"
        assert float(order["total_amount"]) == 1800
        assert float(order["items"][0]["unit_price"]) == 900
        assert order["created_by_name"] == "John Doe"
        assert order["allowed_actions"] == []

    def test_manager_sees_allowed_actions(
        self, client: TestClient, sales_headers, manager_headers
    ) -> None:
        order = place_wholesale_order(client, sales_headers)

        response = client.get(f"{ORDERS}/{order['id']}", headers=manager_headers)

        assert response.status_code == 200
        assert response.json()["allowed_actions"] == ["approve_order", "reject_order"]

    def test_approve_dispatch_deliver(
        self, client: TestClient, sales_headers, manager_headers
    ) -> None:
        order_id = place_wholesale_order(client, sales_headers)["id"]

        response = client.post(
            f"{ORDERS}/{order_id}/approve",
            json={"approver_name": "Mary Manager", "comment": "OK"},
            headers=manager_headers,
        )
        assert response.status_code == 200
        assert response.json()["approved_by"] == "Mary Manager"

        response = client.post(
            f"{ORDERS}/{order_id}/dispatch",
            json={"tracking_number": "TRK-77", "vehicle_id": 1},
            headers=manager_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "dispatched"

        response = client.post(
            f"{ORDERS}/{order_id}/deliver",
            json={"pod_image": "pod/77.png", "notes": "Front desk"},
            headers=manager_headers,
        )
        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "delivered"
        assert body["tracking_number"] == "TRK-77"
        assert body["allowed_actions"] == []

        history = client.get(f"{ORDERS}/{order_id}/history", headers=manager_headers).json()
        assert [entry["to_status"] for entry in history] == [
            "pending",
            "approved",
            "dispatched",
            "delivered",
        ]

    def test_list_and_filter(self, client: TestClient, sales_headers, manager_headers) -> None:
        first = place_wholesale_order(client, sales_headers)
        second = place_wholesale_order(client, sales_headers)
        client.post(f"{ORDERS}/{first['id']}/approve", json={}, headers=manager_headers)

        listing = client.get(ORDERS, headers=manager_headers).json()
        assert listing["total"] == 2
        assert [o["id"] for o in listing["items"]] == [second["id"], first["id"]]

        approved = client.get(ORDERS, params={"status": "approved"}, headers=manager_headers).json()
        assert [o["id"] for o in approved["items"]] == [first["id"]]

    def test_order_items(self, client: TestClient, sales_headers) -> None:
        order = place_wholesale_order(client, sales_headers)

        items = client.get(f"{ORDERS}/{order['id']}/items", headers=sales_headers).json()

        assert len(items) == 1
        assert items[0]["product_name"] == "Laptop Pro"
        assert items[0]["quantity"] == 2


class TestOrderErrors:
    def test_requires_authentication(self, client: TestClient) -> None:
        response = client.get(ORDERS)
        assert response.status_code == 401

    def test_invalid_token(self, client: TestClient) -> None:
        response = client.get(ORDERS, headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_sales_cannot_approve(self, client: TestClient, sales_headers) -> None:
        order = place_wholesale_order(client, sales_headers)

        response = client.post(f"{ORDERS}/{order['id']}/approve", json={}, headers=sales_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "Permission Denied"
        assert "request_id" in response.json()

    def test_dispatch_pending_order_conflicts(
        self, client: TestClient, sales_headers, manager_headers
    ) -> None:
        order = place_wholesale_order(client, sales_headers)

        response = client.post(
            f"{ORDERS}/{order['id']}/dispatch",
            json={"tracking_number": "TRK-1", "vehicle_id": 1},
            headers=manager_headers,
        )

        assert response.status_code == 409
        body = response.json()
        assert body["details"]["current_state"] == "pending"
        assert body["details"]["target_state"] == "dispatched"

    def test_dispatch_checks_role_and_status_before_vehicle(
        self, client: TestClient, sales_headers, manager_headers
    ) -> None:
        order = place_wholesale_order(client, sales_headers)
        payload = {"tracking_number": "TRK-1", "vehicle_id": 999}

        by_sales = client.post(f"{ORDERS}/{order['id']}/dispatch", json=payload, headers=sales_headers)
        by_manager = client.post(
            f"{ORDERS}/{order['id']}/dispatch", json=payload, headers=manager_headers
        )

        assert by_sales.status_code == 403
        assert by_manager.status_code == 409

    def test_reject_without_reason(self, client: TestClient, sales_headers, manager_headers) -> None:
        order = place_wholesale_order(client, sales_headers)

        response = client.post(
            f"{ORDERS}/{order['id']}/reject", json={"reason": "  "}, headers=manager_headers
        )

        assert response.status_code == 422
        assert response.json()["details"]["fields"] == ["reason"]
        assert client.get(f"{ORDERS}/{order['id']}", headers=manager_headers).json()["status"] == "pending"

    def test_unknown_order(self, client: TestClient, manager_headers) -> None:
        response = client.get(f"{ORDERS}/4242", headers=manager_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Order 4242 not found"

    def test_request_validation(self, client: TestClient, sales_headers) -> None:
        response = client.post(
            ORDERS,
            json={"customer_id": 2, "line_items": []},
            headers=sales_headers,
        )

        assert response.status_code == 422
        assert response.json()["error"] == "Validation Error"
