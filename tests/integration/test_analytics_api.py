"""
Integration Tests - Analytics and Search APIs
"""
import pytest


@pytest.fixture
async def studio_activity(client, client_record, staff_member, products):
    sessions = [
        ("SESS-1", "Portrait", "2025-06-01", 200),
        ("SESS-2", "Portrait", "2025-05-10", 300),
        ("SESS-3", "Wedding", "2025-06-25", 2500),
        ("SESS-4", "Wedding", "2024-10-01", 1800),
    ]
    for session_id, session_type, day, fee in sessions:
        response = await client.post("/api/sessions", json={
            "sessionId": session_id,
            "sessionType": session_type,
            "sessionDate": day,
            "sessionFee": fee,
            "location": "Riverside Park",
            "clientEmail": "jane@x.com",
        })
        assert response.status_code == 201

    invoices = [
        (1001, "2025-06-02", 200, 200),
        (1002, "2025-05-11", 300, 100),
        (1003, "2025-05-20", 50, 50),
        (1004, "2024-01-15", 900, 900),
    ]
    for number, day, total, paid in invoices:
        response = await client.post("/api/invoices", json={
            "invoiceNumber": number,
            "invoiceDate": day,
            "totalDue": total,
            "paymentReceived": paid,
            "clientEmail": "jane@x.com",
        })
        assert response.status_code == 201


class TestAnalyticsApi:
    """Tests for /api/analytics"""

    async def test_dashboard(self, client, studio_activity):
        body = (await client.get("/api/analytics/dashboard")).json()

        assert body == {
            "totalClients": 1,
            "upcomingSessions": 1,
            "monthlyRevenue": 200.0,
            "outstandingBalance": 200.0,
            "totalStaff": 1,
            "activeProducts": 3,
        }

    async def test_dashboard_on_empty_database(self, client):
        body = (await client.get("/api/analytics/dashboard")).json()

        assert body["totalClients"] == 0
        assert body["monthlyRevenue"] == 0.0

    async def test_revenue_trends_group_by_month(self, client, studio_activity):
        rows = (await client.get("/api/analytics/revenue-trends")).json()

        assert rows == [
            {"month": "2025-05", "revenue": 150.0, "invoiceCount": 2},
            {"month": "2025-06", "revenue": 200.0, "invoiceCount": 1},
        ]

    async def test_session_types_cover_six_months(self, client, studio_activity):
        rows = (await client.get("/api/analytics/session-types")).json()

        assert [(row["sessionType"], row["sessionCount"]) for row in rows] == [
            ("Portrait", 2),
            ("Wedding", 1),
        ]
        assert rows[0]["totalRevenue"] == 500.0
        assert rows[0]["avgFee"] == 250.0

    async def test_marketing_conversion(self, client):
        for email in ["a@x.com", "b@x.com"]:
            await client.post("/api/marketing-leads", json={"email": email, "interests": "Weddings"})
        await client.post("/api/marketing-leads", json={"email": "c@x.com", "interests": "Family"})
        await client.post("/api/clients", json={
            "clientEmail": "a@x.com", "firstName": "A", "lastName": "A", "marketingLeadEmail": "a@x.com",
        })

        rows = (await client.get("/api/analytics/marketing-conversion")).json()

        assert rows == [
            {"interests": "Weddings", "totalLeads": 2, "convertedClients": 1, "conversionRate": 50.0},
            {"interests": "Family", "totalLeads": 1, "convertedClients": 0, "conversionRate": 0.0},
        ]

    async def test_staff_performance(self, client, studio_activity, staff_member):
        await client.post("/api/sessions/SESS-1/assign-staff", json={"staffEmail": staff_member["staffEmail"]})
        await client.post("/api/sessions/SESS-4/assign-staff", json={"staffEmail": staff_member["staffEmail"]})

        [row] = (await client.get("/api/analytics/staff-performance")).json()

        assert row["staffName"] == "Ansel Adams"
        assert row["sessionsAssigned"] == 2
        assert row["recentSessions"] == 1


class TestSearchApi:
    """Tests for /api/search"""

    async def test_empty_query(self, client):
        response = await client.get("/api/search")

        assert response.json() == {"clients": [], "sessions": [], "invoices": [], "totalResults": 0}

    async def test_finds_each_entity_type(self, client, studio_activity):
        clients = (await client.get("/api/search", params={"q": "JANE"})).json()
        assert clients["clients"][0]["name"] == "Jane Doe"
        assert clients["clients"][0]["type"] == "Client"
        assert clients["totalResults"] == 1

        sessions = (await client.get("/api/search", params={"q": "riverside"})).json()
        assert len(sessions["sessions"]) == 4
        assert sessions["sessions"][0]["name"] in {"Portrait Session", "Wedding Session"}

        invoices = (await client.get("/api/search", params={"q": "100"})).json()
        assert sorted(hit["id"] for hit in invoices["invoices"]) == ["1001", "1002", "1003", "1004"]
        assert invoices["invoices"][0]["name"].startswith("Invoice #")

    async def test_results_are_capped(self, client, client_record):
        for n in range(12):
            await client.post("/api/sessions", json={
                "sessionId": f"S{n}", "sessionType": "Headshot", "sessionDate": "2025-06-01", "clientEmail": "jane@x.com",
            })

        body = (await client.get("/api/search", params={"q": "headshot"})).json()

        assert len(body["sessions"]) == 10
        assert body["totalResults"] == 10

    async def test_wildcards_match_literally(self, client, studio_activity):
        for term in ["%", "_"]:
            body = (await client.get("/api/search", params={"q": term})).json()

            assert body["totalResults"] == 0
