"""Contract tests for quotation API endpoints."""

import pytest
from fastapi.testclient import TestClient


pytestmark = pytest.mark.contract


class TestQuotationCrud:
    """Contract tests for /api/quotations."""

    def test_create_quotation(self, client: TestClient, api_quotation: dict):
        assert api_quotation["status"] == "draft"
        assert api_quotation["quotation_number"].startswith("Q-")
        assert api_quotation["gst_percent"] == 18
        assert api_quotation["final_price"] == 14041.19
        room = api_quotation["rooms"][0]
        assert room["selling_price"] == 11000
        assert room["discounted_price"] == 10000
        assert room["products"][0]["kind"] == "product"
        assert room["accessories"][0]["kind"] == "accessory"

    def test_create_quotation_unknown_customer(self, client: TestClient):
        response = client.post("/api/quotations", json={"customer_id": "missing"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "CUSTOMER_NOT_FOUND"

    def test_create_quotation_missing_customer_field(self, client: TestClient):
        response = client.post("/api/quotations", json={"title": "No customer"})

        assert response.status_code == 422

    def test_list_quotations(self, client: TestClient, api_quotation: dict, api_customer: dict):
        response = client.get("/api/quotations", params={"customer_id": api_customer["id"], "status": "draft"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 1
        assert data["quotations"][0]["id"] == api_quotation["id"]

    def test_get_quotation_not_found(self, client: TestClient):
        response = client.get("/api/quotations/invalid-id")

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error_code"] == "QUOTATION_NOT_FOUND"

    def test_patch_quotation_reprices(self, client: TestClient, api_quotation: dict):
        response = client.patch(
            f"/api/quotations/{api_quotation['id']}",
            json={"gst_percent": 0, "installation_handling": 0},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["gst_amount"] == 0
        assert data["final_price"] == 11399.31

    def test_patch_quotation_invalid_discount(self, client: TestClient, api_quotation: dict):
        response = client.patch(
            f"/api/quotations/{api_quotation['id']}",
            json={"global_discount_percent": 120},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_duplicate_quotation(self, client: TestClient, api_quotation: dict):
        response = client.post(f"/api/quotations/{api_quotation['id']}/duplicate")

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["id"] != api_quotation["id"]
        assert data["title"] == "API Project (Copy)"
        assert data["status"] == "draft"
        assert data["final_price"] == 14041.19
        assert data["rooms"][0]["id"] != api_quotation["rooms"][0]["id"]

    def test_duplicate_quotation_unknown_customer(self, client: TestClient, api_quotation: dict):
        response = client.post(
            f"/api/quotations/{api_quotation['id']}/duplicate", json={"customer_id": "missing"}
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "CUSTOMER_NOT_FOUND"

    def test_delete_quotation(self, client: TestClient, api_quotation: dict):
        response = client.delete(f"/api/quotations/{api_quotation['id']}")

        assert response.status_code == 200
        assert client.get(f"/api/quotations/{api_quotation['id']}").status_code == 404


class TestRoomsAndItems:
    """Contract tests for nested room, item and charge endpoints."""

    def test_add_room_and_items(self, client: TestClient, api_quotation: dict):
        qid = api_quotation["id"]

        room = client.post(f"/api/quotations/{qid}/rooms", json={"name": "Wardrobe"}).json()["data"]
        item_response = client.post(
            f"/api/quotations/{qid}/rooms/{room['id']}/items",
            json={"kind": "product", "name": "Sliding Wardrobe", "selling_price": 40000},
        )
        charge_response = client.post(
            f"/api/quotations/{qid}/rooms/{room['id']}/installation-charges",
            json={"cabinet_type": "Tall unit", "width_mm": 304.8, "height_mm": 304.8},
        )

        assert item_response.status_code == 201
        assert item_response.json()["data"]["quantity"] == 1
        assert charge_response.status_code == 201
        assert charge_response.json()["data"]["amount"] == 130

        totals = client.get(f"/api/quotations/{qid}/totals").json()["data"]
        assert totals["subtotal"] == 50000
        assert totals["totalInstallationCharges"] == 2029.31
        assert [r["name"] for r in totals["rooms"]] == ["Kitchen", "Wardrobe"]

    def test_update_and_delete_item(self, client: TestClient, api_quotation: dict):
        qid = api_quotation["id"]
        room = api_quotation["rooms"][0]
        product_id = room["products"][0]["id"]

        update = client.patch(
            f"/api/quotations/{qid}/rooms/{room['id']}/items/{product_id}",
            json={"quantity": 2},
        )
        assert update.status_code == 200
        assert update.json()["data"]["quantity"] == 2

        delete = client.delete(f"/api/quotations/{qid}/rooms/{room['id']}/items/{product_id}")
        assert delete.status_code == 200

        quotation = client.get(f"/api/quotations/{qid}").json()["data"]
        assert quotation["rooms"][0]["products"] == []
        assert quotation["rooms"][0]["discounted_price"] == 1000

    def test_item_not_found(self, client: TestClient, api_quotation: dict):
        room_id = api_quotation["rooms"][0]["id"]

        response = client.delete(f"/api/quotations/{api_quotation['id']}/rooms/{room_id}/items/nope")

        assert response.status_code == 404
        assert response.json()["error_code"] == "ITEM_NOT_FOUND"

    def test_room_not_found(self, client: TestClient, api_quotation: dict):
        response = client.patch(f"/api/quotations/{api_quotation['id']}/rooms/nope", json={"name": "X"})

        assert response.status_code == 404
        assert response.json()["error_code"] == "ROOM_NOT_FOUND"

    def test_reorder_rooms(self, client: TestClient, api_quotation: dict):
        qid = api_quotation["id"]
        kitchen_id = api_quotation["rooms"][0]["id"]
        wardrobe_id = client.post(f"/api/quotations/{qid}/rooms", json={"name": "Wardrobe"}).json()["data"]["id"]

        response = client.post(f"/api/quotations/{qid}/rooms/reorder", json={"room_ids": [wardrobe_id, kitchen_id]})

        assert response.status_code == 200
        assert [r["name"] for r in response.json()["data"]["rooms"]] == ["Wardrobe", "Kitchen"]
        totals = client.get(f"/api/quotations/{qid}/totals").json()["data"]
        assert [r["name"] for r in totals["rooms"]] == ["Wardrobe", "Kitchen"]

    def test_reorder_rooms_incomplete(self, client: TestClient, api_quotation: dict):
        response = client.post(f"/api/quotations/{api_quotation['id']}/rooms/reorder", json={"room_ids": []})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_REQUEST"

    def test_update_installation_charge(self, client: TestClient, api_quotation: dict):
        room = api_quotation["rooms"][0]
        charge_id = room["installation_charges"][0]["id"]

        response = client.patch(
            f"/api/quotations/{api_quotation['id']}/rooms/{room['id']}/installation-charges/{charge_id}",
            json={"price_per_sqft": 260},
        )

        assert response.status_code == 200
        assert response.json()["data"]["amount"] == 2798.62
        totals = client.get(f"/api/quotations/{api_quotation['id']}/totals").json()["data"]
        assert totals["totalInstallationCharges"] == 3298.62

    def test_update_installation_charge_invalid(self, client: TestClient, api_quotation: dict):
        room = api_quotation["rooms"][0]
        charge_id = room["installation_charges"][0]["id"]

        response = client.patch(
            f"/api/quotations/{api_quotation['id']}/rooms/{room['id']}/installation-charges/{charge_id}",
            json={"width_mm": 0},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    def test_delete_installation_charge(self, client: TestClient, api_quotation: dict):
        room = api_quotation["rooms"][0]
        charge_id = room["installation_charges"][0]["id"]

        response = client.delete(
            f"/api/quotations/{api_quotation['id']}/rooms/{room['id']}/installation-charges/{charge_id}"
        )

        assert response.status_code == 200
        validation = client.get(f"/api/quotations/{api_quotation['id']}/validation").json()["data"]
        assert [e["type"] for e in validation["errors"]] == ["missing_installation"]


class TestValidationAndStatus:
    """Contract tests for validation and the save gate."""

    def test_validation_result(self, client: TestClient, api_quotation: dict):
        response = client.get(f"/api/quotations/{api_quotation['id']}/validation")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["isValid"] is True
        assert data["errors"] == []
        assert data["warnings"][0]["accessories"] == ["skirting", "sliding mechanism", "t profile"]

    def test_save_quotation(self, client: TestClient, api_quotation: dict):
        response = client.put(f"/api/quotations/{api_quotation['id']}/status", json={"status": "saved"})

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "saved"

    def test_save_invalid_quotation(self, client: TestClient, api_customer: dict):
        created = client.post("/api/quotations", json={"customer_id": api_customer["id"]}).json()["data"]

        response = client.put(f"/api/quotations/{created['id']}/status", json={"status": "saved"})

        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "QUOTATION_INVALID"
        assert data["data"]["isValid"] is False
        assert data["data"]["errors"][0]["message"] == "Quotation must have at least one room."

    def test_validation_not_found(self, client: TestClient):
        response = client.get("/api/quotations/invalid-id/validation")

        assert response.status_code == 404
        assert response.json()["error_code"] == "QUOTATION_NOT_FOUND"


class TestExportAndConversion:
    """Contract tests for Excel download and invoice conversion."""

    def test_download_excel(self, client: TestClient, api_quotation: dict):
        response = client.get(f"/api/quotations/{api_quotation['id']}/excel")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert api_quotation["quotation_number"] in response.headers["content-disposition"]
        assert response.content[:2] == b"PK"

    def test_convert_requires_saved(self, client: TestClient, api_quotation: dict):
        response = client.post(f"/api/quotations/{api_quotation['id']}/invoice")

        assert response.status_code == 409
        assert response.json()["error_code"] == "QUOTATION_NOT_SAVED"

    def test_convert_and_lock(self, client: TestClient, api_quotation: dict):
        qid = api_quotation["id"]
        client.put(f"/api/quotations/{qid}/status", json={"status": "saved"})

        response = client.post(f"/api/quotations/{qid}/invoice", json={"notes": "Site visit done"})

        assert response.status_code == 201
        invoice = response.json()["data"]
        assert invoice["total_amount"] == 14041.19
        assert invoice["notes"] == "Site visit done"

        again = client.post(f"/api/quotations/{qid}/invoice")
        assert again.status_code == 409
        assert again.json()["error_code"] == "QUOTATION_ALREADY_CONVERTED"

        edit = client.patch(f"/api/quotations/{qid}", json={"title": "Changed"})
        assert edit.status_code == 409
        assert edit.json()["error_code"] == "QUOTATION_LOCKED"
