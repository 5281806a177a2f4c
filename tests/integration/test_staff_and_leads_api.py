"""
Integration Tests - Staff and Marketing Leads APIs
"""


async def book(client, session_id: str, day: str, staff_email: str) -> None:
    response = await client.post("/api/sessions", json={
        "sessionId": session_id,
        "sessionDate": day,
        "sessionType": "Portrait",
        "sessionStartTime": "10:00",
        "sessionEndTime": "11:00",
        "clientEmail": "jane@x.com",
    })
    assert response.status_code == 201
    response = await client.post(f"/api/sessions/{session_id}/assign-staff", json={"staffEmail": staff_email})
    assert response.status_code == 201


class TestStaffApi:
    """Tests for /api/staff"""

    async def test_list(self, client, staff_member):
        response = await client.get("/api/staff")

        assert response.status_code == 200
        [row] = response.json()
        assert row["staffEmail"] == "ansel@studio.test"
        assert row["payRate"] == 45.0
        assert row["clientsManaged"] == 0
        assert row["sessionsAssigned"] == 0

    async def test_detail_workload(self, client, staff_member, client_record):
        email = staff_member["staffEmail"]
        await client.put("/api/clients/jane@x.com", json={"managedByStaffEmail": email})
        await book(client, "SESS-A", "2024-12-01", email)
        await book(client, "SESS-B", "2025-04-01", email)
        await book(client, "SESS-C", "2025-06-20", email)

        body = (await client.get(f"/api/staff/{email}")).json()

        assert body["clientsManaged"] == 1
        assert body["sessionsAssigned"] == 3
        assert body["recentSessions"] == 2
        assert body["upcomingSessions"] == 1

    async def test_assignments_newest_first(self, client, staff_member, client_record):
        email = staff_member["staffEmail"]
        await book(client, "SESS-A", "2025-05-01", email)
        await book(client, "SESS-B", "2025-06-01", email)

        response = await client.get(f"/api/staff/{email}/assignments")

        rows = response.json()
        assert [row["sessionId"] for row in rows] == ["SESS-B", "SESS-A"]
        assert rows[0]["clientName"] == "Jane Doe"

    async def test_update(self, client, staff_member):
        response = await client.put("/api/staff/ansel@studio.test", json={"ROLE": "Studio Manager", "pay_rate": 50})

        assert response.status_code == 200
        body = (await client.get("/api/staff/ansel@studio.test")).json()
        assert body["role"] == "Studio Manager"
        assert body["payRate"] == 50.0

    async def test_missing_staff_is_404(self, client):
        assert (await client.get("/api/staff/nobody@studio.test")).status_code == 404
        assert (await client.put("/api/staff/nobody@studio.test", json={"role": "x"})).status_code == 404
        assert (await client.delete("/api/staff/nobody@studio.test")).status_code == 404

    async def test_delete(self, client, staff_member):
        assert (await client.delete("/api/staff/ansel@studio.test")).status_code == 200
        assert (await client.get("/api/staff")).json() == []


class TestMarketingLeadsApi:
    """Tests for /api/marketing-leads"""

    async def test_conversion_status(self, client):
        for email, interests in [("lead1@x.com", "Weddings"), ("lead2@x.com", "Portraits")]:
            response = await client.post("/api/marketing-leads", json={
                "email": email, "interests": interests, "dateSignedUp": "2025-05-01",
            })
            assert response.status_code == 201

        await client.post("/api/clients", json={
            "clientEmail": "lead1@x.com", "firstName": "Lea", "lastName": "Ng", "marketingLeadEmail": "lead1@x.com",
        })

        rows = {row["email"]: row for row in (await client.get("/api/marketing-leads")).json()}

        assert rows["lead1@x.com"]["status"] == "converted"
        assert rows["lead1@x.com"]["convertedToClient"] == "lead1@x.com"
        assert rows["lead2@x.com"]["status"] == "lead"
        assert rows["lead2@x.com"]["convertedToClient"] is None

    async def test_sign_up_date_defaults_to_today(self, client):
        await client.post("/api/marketing-leads", json={"email": "new@x.com"})

        body = (await client.get("/api/marketing-leads/new@x.com")).json()

        assert body["dateSignedUp"] is not None
        assert body["status"] == "lead"

    async def test_missing_lead_is_404(self, client):
        response = await client.get("/api/marketing-leads/nobody@x.com")

        assert response.status_code == 404
