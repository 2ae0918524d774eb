import asyncio
from contextlib import asynccontextmanager
from pathlib import Path

from httpx import ASGITransport, AsyncClient

from app.config import AppSettings
from app.db.session import Database
from app.main import create_app

HEADERS = {"X-User-Id": "ana"}


def _client(settings: AppSettings, database: Database | None = None):
    app = create_app(settings, database)

    @asynccontextmanager
    async def _manager():
        async with app.router.lifespan_context(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client

    return _manager


def _local_settings(tmp_path: Path) -> AppSettings:
    return AppSettings(storage_backend="local", local_data_dir=str(tmp_path / "accounts"))


def test_requests_without_user_context_are_rejected(tmp_path: Path):
    client_manager = _client(_local_settings(tmp_path))

    async def _scenario():
        async with client_manager() as api_client:
            response = await api_client.get("/proposals")
            assert response.status_code == 401

            response = await api_client.get("/proposals", headers={"X-User-Id": "../etc"})
            assert response.status_code == 400

            health = await api_client.get("/health")
            assert health.status_code == 200
            assert health.json()["storage"] == "local"

    asyncio.run(_scenario())


def test_proposal_lifecycle_through_the_api(tmp_path: Path):
    client_manager = _client(_local_settings(tmp_path))

    async def _scenario():
        async with client_manager() as api_client:
            event = await api_client.post(
                "/events",
                json={"title": "Silva Birthday", "date": "2025-12-05", "category": "DJ"},
                headers=HEADERS,
            )
            assert event.status_code == 201

            created = await api_client.post(
                "/proposals",
                json={
                    "client_name": "Ana Souza",
                    "event_name": "Souza Wedding",
                    "amount": "4500",
                    "date": "2025-12-05",
                },
                headers=HEADERS,
            )
            assert created.status_code == 201
            payload = created.json()
            proposal_id = payload["proposal"]["id"]
            assert payload["proposal"]["stage"] == "Sent"
            assert payload["conflict"]["title"] == "Silva Birthday"
            assert "already booked" in payload["advisory"]

            closed = await api_client.put(f"/proposals/{proposal_id}", json={"stage": "Closed"}, headers=HEADERS)
            assert closed.status_code == 200
            assert closed.json()["stage"] == "Closed"

            pending = (await api_client.get("/transactions", params={"view": "pending"}, headers=HEADERS)).json()
            assert [t["description"] for t in pending] == ["Contract - Souza Wedding"]
            assert pending[0]["proposal_id"] == proposal_id

            schedule = (await api_client.get("/events", headers=HEADERS)).json()
            assert [e["id"] for e in schedule][-1] == f"prop-{proposal_id}"

            readonly = await api_client.post(
                f"/events/prop-{proposal_id}/costs",
                json={"description": "Crew", "amount": "100"},
                headers=HEADERS,
            )
            assert readonly.status_code == 422

            board = (await api_client.get("/proposals/board", params={"month": "2025-12"}, headers=HEADERS)).json()
            assert [p["id"] for p in board["Closed"]] == [proposal_id]
            assert board["Sent"] == []

            dashboard = (await api_client.get("/dashboard", headers=HEADERS)).json()
            assert dashboard["kpis"]["receivable_total"] == 4500
            assert dashboard["kpis"]["active_proposals"] == 0
            assert dashboard["monthly_goal"] == 10000
            assert len(dashboard["revenue_history"]) == 6

            clients = (await api_client.get("/clients", headers=HEADERS)).json()
            assert [c["name"] for c in clients] == ["Ana Souza"]

    asyncio.run(_scenario())


def test_validation_and_missing_records_map_to_http_errors(tmp_path: Path):
    client_manager = _client(_local_settings(tmp_path))

    async def _scenario():
        async with client_manager() as api_client:
            invalid = await api_client.post(
                "/proposals",
                json={"client_name": "Ana", "event_name": "Party", "amount": "0", "date": "2025-12-05"},
                headers=HEADERS,
            )
            assert invalid.status_code == 422
            assert invalid.json()["field"] == "amount"

            bad_stage = await api_client.put("/proposals/x", json={"stage": "Won"}, headers=HEADERS)
            assert bad_stage.status_code == 422

            missing = await api_client.put("/proposals/missing", json={"stage": "Closed"}, headers=HEADERS)
            assert missing.status_code == 404

            missing_event = await api_client.get("/events/missing", headers=HEADERS)
            assert missing_event.status_code == 404

            listed = (await api_client.get("/proposals", headers=HEADERS)).json()
            assert listed == []

    asyncio.run(_scenario())


def test_event_details_financials_and_messages(tmp_path: Path):
    client_manager = _client(_local_settings(tmp_path))

    async def _scenario():
        async with client_manager() as api_client:
            await api_client.put(
                "/profile",
                json={
                    "name": "Ana DJ",
                    "message_templates": {"review_request": "Thanks {cliente}! Review: {link}"},
                },
                headers=HEADERS,
            )
            event = (
                await api_client.post(
                    "/events",
                    json={
                        "title": "Gala",
                        "date": "2025-12-10",
                        "client_name": "Bruno Lima",
                        "amount": "2000",
                        "checklist": ["Confirm venue"],
                    },
                    headers=HEADERS,
                )
            ).json()
            event_id = event["id"]
            task_id = event["checklist"][0]["id"]

            toggled = (
                await api_client.post(f"/events/{event_id}/checklist/{task_id}/toggle", headers=HEADERS)
            ).json()
            assert toggled["checklist"][0]["done"] is True

            await api_client.post(
                f"/events/{event_id}/costs",
                json={"description": "Crew", "amount": "500", "category": "Crew"},
                headers=HEADERS,
            )
            await api_client.post(
                f"/events/{event_id}/timeline",
                json={"time": "19:30", "title": "Guests arrive"},
                headers=HEADERS,
            )

            financials = (await api_client.get(f"/events/{event_id}/financials", headers=HEADERS)).json()
            assert financials == {"revenue": 2000.0, "total_costs": 500.0, "profit": 1500.0, "margin_pct": 75.0}

            messages = (
                await api_client.get(f"/events/{event_id}/messages", params={"link": "https://g.page/r"}, headers=HEADERS)
            ).json()
            assert messages["review_request"] == "Thanks Bruno! Review: https://g.page/r"
            assert "*19:30* - Guests arrive" in messages["timeline_share"]
            assert "10/12/2025" in messages["timeline_share"]

            conflict = (await api_client.get("/events/conflicts", params={"date": "2025-12-10"}, headers=HEADERS)).json()
            assert conflict["conflict"]["id"] == event_id

            deleted = await api_client.delete(f"/events/{event_id}", headers=HEADERS)
            assert deleted.status_code == 204
            assert (await api_client.get("/events", headers=HEADERS)).json() == []

    asyncio.run(_scenario())


def test_ledger_directory_and_goal_endpoints(tmp_path: Path):
    client_manager = _client(_local_settings(tmp_path))

    async def _scenario():
        async with client_manager() as api_client:
            income = (
                await api_client.post(
                    "/transactions",
                    json={"description": "Deposit", "amount": "1000", "date": "2025-11-05", "type": "Income", "status": "Pending"},
                    headers=HEADERS,
                )
            ).json()
            await api_client.put(f"/transactions/{income['id']}/status", json={"status": "Paid"}, headers=HEADERS)

            goal = await api_client.put("/profile/goal", json={"monthly_goal": "4000"}, headers=HEADERS)
            assert goal.status_code == 200
            assert float(goal.json()["monthly_goal"]) == 4000

            negative = await api_client.put("/profile/goal", json={"monthly_goal": "-1"}, headers=HEADERS)
            assert negative.status_code == 422

            kpis = (await api_client.get("/dashboard/kpis", headers=HEADERS)).json()
            assert kpis["received_total"] == 1000
            assert kpis["goal_attainment_pct"] == 25

            supplier = (
                await api_client.post("/suppliers", json={"name": "Lights Co", "category": "Lighting"}, headers=HEADERS)
            ).json()
            await api_client.post("/services", json={"name": "Full night", "price": "2500"}, headers=HEADERS)
            assert len((await api_client.get("/services", headers=HEADERS)).json()) == 1

            removed = await api_client.delete(f"/suppliers/{supplier['id']}", headers=HEADERS)
            assert removed.status_code == 204
            assert (await api_client.get("/suppliers", headers=HEADERS)).json() == []

            other_owner = (await api_client.get("/transactions", headers={"X-User-Id": "bruno"})).json()
            assert other_owner == []

    asyncio.run(_scenario())


def test_draft_extraction_endpoint(tmp_path: Path):
    client_manager = _client(_local_settings(tmp_path))

    async def _scenario():
        async with client_manager() as api_client:
            response = await api_client.post(
                "/proposals/extract",
                json={"text": "Hi, my name is Carla. I need a DJ for my wedding on 14/02/2026"},
                headers=HEADERS,
            )
            assert response.status_code == 200
            draft = response.json()
            assert draft["client_name"] == "Carla"
            assert draft["event_date"] == "2026-02-14"
            assert draft["service_type"].lower() == "dj"
            assert draft["conflict"] is None

    asyncio.run(_scenario())


def test_sql_backend_serves_the_same_api(tmp_path: Path):
    database = Database(url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    settings = AppSettings(storage_backend="sql", database_url=database.url)
    client_manager = _client(settings, database)

    async def _scenario():
        async with client_manager() as api_client:
            created = await api_client.post(
                "/proposals",
                json={"client_name": "Ana", "event_name": "Party", "amount": "900", "date": "2025-12-05"},
                headers=HEADERS,
            )
            assert created.status_code == 201
            proposal_id = created.json()["proposal"]["id"]

            closed = await api_client.put(f"/proposals/{proposal_id}", json={"stage": "Closed"}, headers=HEADERS)
            assert closed.status_code == 200

        async with client_manager() as api_client:
            transactions = (await api_client.get("/transactions", headers=HEADERS)).json()
            assert [t["proposal_id"] for t in transactions] == [proposal_id]

        await database.dispose()

    asyncio.run(_scenario())
