"""
Integration Tests - Invoices API
"""


class TestInvoicesApi:
    """Tests for /api/invoices"""

    async def test_round_trip_with_line_items(self, client, client_record, products):
        payload = {
            "invoiceNumber": 2001,
            "invoiceDate": "2025-06-10",
            "description": "Portrait prints",
            "subtotal": 545.00,
            "tax": 43.60,
            "totalDue": 588.60,
            "paymentReceived": 0,
            "balanceDueDate": "2025-07-10",
            "clientEmail": "jane@x.com",
            "lineItems": [
                {"productId": "PRT-8X10", "quantity": 2},
                {"productId": "ALB-LTH", "quantity": 1},
            ],
        }

        created = await client.post("/api/invoices", json=payload)
        assert created.status_code == 201
        assert created.json()["invoiceNumber"] == 2001

        body = (await client.get("/api/invoices/2001/details")).json()

        assert body["subtotal"] == 545.0
        assert body["tax"] == 43.6
        assert body["totalDue"] == 588.6
        assert body["balanceDue"] == 588.6
        assert body["clientName"] == "Jane Doe"
        assert body["paymentStatus"] == "pending"
        assert {item["productId"]: item["lineTotal"] for item in body["lineItems"]} == {
            "PRT-8X10": 50.0,
            "ALB-LTH": 450.0,
        }
        assert body["lineItemsTotal"] == 500.0

    async def test_failed_line_item_rolls_back_invoice(self, client, client_record, products):
        response = await client.post("/api/invoices", json={
            "invoiceNumber": 2002,
            "invoiceDate": "2025-06-10",
            "totalDue": 100,
            "clientEmail": "jane@x.com",
            "lineItems": [{"productId": "NO-SUCH-SKU", "quantity": 1}],
        })

        assert response.status_code == 500
        assert response.json()["error"] == "Database error"
        assert (await client.get("/api/invoices/2002")).status_code == 404

    async def test_repeated_product_is_rejected(self, client, client_record, products):
        response = await client.post("/api/invoices", json={
            "invoiceNumber": 2003,
            "invoiceDate": "2025-06-10",
            "clientEmail": "jane@x.com",
            "lineItems": [{"productId": "PRT-8X10"}, {"productId": "PRT-8X10"}],
        })

        assert response.status_code == 400

    async def test_overdue_status(self, client, client_record):
        await client.post("/api/invoices", json={
            "invoiceNumber": 2004,
            "invoiceDate": "2025-05-01",
            "totalDue": 80,
            "balanceDueDate": "2025-06-01",
            "clientEmail": "jane@x.com",
        })

        [row] = (await client.get("/api/invoices")).json()

        assert row["paymentStatus"] == "overdue"
        assert row["lineItemCount"] == 0

    async def test_partial_payment_keeps_balance(self, client, client_record):
        await client.post("/api/invoices", json={
            "invoiceNumber": 2005, "invoiceDate": "2025-06-01", "totalDue": 200, "clientEmail": "jane@x.com",
        })

        response = await client.put("/api/invoices/2005/payment", json={"paymentReceived": 75.50})

        assert response.status_code == 200
        body = (await client.get("/api/invoices/2005")).json()
        assert body["paymentReceived"] == 75.5
        assert body["balanceDue"] == 124.5
        assert body["paymentStatus"] == "pending"

    async def test_payment_must_be_positive(self, client, client_record):
        await client.post("/api/invoices", json={
            "invoiceNumber": 2006, "invoiceDate": "2025-06-01", "totalDue": 200, "clientEmail": "jane@x.com",
        })

        response = await client.put("/api/invoices/2006/payment", json={"paymentReceived": 0})

        assert response.status_code == 400

    async def test_overpayment_is_refused(self, client, client_record):
        await client.post("/api/invoices", json={
            "invoiceNumber": 2007,
            "invoiceDate": "2025-05-01",
            "totalDue": 100,
            "balanceDueDate": "2025-06-01",
            "clientEmail": "jane@x.com",
        })

        response = await client.put("/api/invoices/2007/payment", json={"paymentReceived": 150})

        assert response.status_code == 400
        assert response.json() == {"error": "Payment exceeds balance due"}
        body = (await client.get("/api/invoices/2007")).json()
        assert body["balanceDue"] == 100.0
        assert body["paymentReceived"] == 0.0
        assert body["paymentStatus"] == "overdue"

    async def test_payment_on_missing_invoice_is_404(self, client):
        response = await client.put("/api/invoices/9999/payment", json={"paymentReceived": 10})

        assert response.status_code == 404
        assert response.json() == {"error": "Invoice not found"}

    async def test_non_numeric_invoice_number_is_400(self, client):
        response = await client.get("/api/invoices/abc")

        assert response.status_code == 400

    async def test_partial_update_and_delete(self, client, client_record, products):
        await client.post("/api/invoices", json={
            "invoiceNumber": 2007,
            "invoiceDate": "2025-06-01",
            "clientEmail": "jane@x.com",
            "lineItems": [{"productId": "FRM-OAK", "quantity": 1}],
        })

        updated = await client.put("/api/invoices/2007", json={"description": "Framed print", "tax": "5.20"})
        assert updated.status_code == 200
        body = (await client.get("/api/invoices/2007")).json()
        assert body["description"] == "Framed print"
        assert body["tax"] == 5.2

        deleted = await client.delete("/api/invoices/2007")
        assert deleted.status_code == 200
        assert (await client.get("/api/invoices/2007/details")).status_code == 404


class TestEndToEnd:
    """Client, session, invoice and payment through the HTTP API"""

    async def test_studio_day(self, client, now):
        today = now.date().isoformat()

        response = await client.post("/api/clients", json={
            "clientEmail": "jane@x.com", "firstName": "Jane", "lastName": "Doe",
        })
        assert response.status_code == 201

        response = await client.post("/api/sessions", json={
            "clientEmail": "jane@x.com",
            "sessionDate": today,
            "sessionType": "Portrait",
            "sessionFee": 300.00,
        })
        assert response.status_code == 201

        client_body = (await client.get("/api/clients/jane@x.com")).json()
        assert client_body["lastSessionDate"] == today

        response = await client.post("/api/invoices", json={
            "invoiceNumber": 1001,
            "invoiceDate": today,
            "totalDue": 300.00,
            "paymentReceived": 0,
            "clientEmail": "jane@x.com",
        })
        assert response.status_code == 201

        invoice = (await client.get("/api/invoices/1001")).json()
        assert invoice["paymentStatus"] == "pending"
        assert invoice["balanceDue"] == 300.0

        response = await client.put("/api/invoices/1001/payment", json={"paymentReceived": 300.00})
        assert response.status_code == 200

        invoice = (await client.get("/api/invoices/1001")).json()
        assert invoice["paymentStatus"] == "paid"
        assert invoice["balanceDue"] == 0.0
        assert invoice["paymentReceived"] == 300.0
