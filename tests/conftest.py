import os

# Point the app at an in-memory database before anything imports the settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["RESEND_API_KEY"] = ""
os.environ["GROQ_API_KEY"] = ""
os.environ["ICD10_CLIENT_ID"] = ""
os.environ["ICD10_CLIENT_SECRET"] = ""
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from typing import Dict, List

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.model_registry  # noqa: F401
from app.database.connection import Base, get_db
from app.icd10system.icd10_service import icd10_service
from app.icd10system.who_client import WhoIcdClient
from app.main import app as fastapi_app
from app.users import auth_services
from config.icd10config import icd10_settings
from config.transcriptionconfig import transcription_settings

PASSWORD = "Secret123"


@pytest.fixture()
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture()
def outbox(monkeypatch) -> List[Dict]:
    """Capture outgoing emails instead of calling Resend."""
    sent: List[Dict] = []

    def capture(kind):
        def _send(email, *args, **kwargs):
            sent.append({"kind": kind, "to": email, "args": args})
            return True
        return _send

    monkeypatch.setattr(auth_services, "send_welcome_email", capture("welcome"))
    monkeypatch.setattr(auth_services, "send_reset_code_email", capture("reset_code"))
    monkeypatch.setattr(
        auth_services, "send_reset_password_link_with_token_in_email", capture("reset_link")
    )
    return sent


@pytest.fixture(autouse=True)
def fresh_settings():
    yield
    icd10_settings.__init__()
    transcription_settings.__init__()


@pytest.fixture()
async def client(session_factory, outbox, monkeypatch):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(icd10_service, "session_factory", session_factory)
    monkeypatch.setattr(icd10_service, "pg_trgm_available", None)
    monkeypatch.setattr(icd10_service, "who_client", WhoIcdClient())

    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def register(client):
    async def _register(email: str, role: str = "doctor", first_name: str = "Amina", last_name: str = "Wekesa"):
        response = await client.post(
            "/auth/register",
            json={
                "email": email,
                "password": PASSWORD,
                "firstName": first_name,
                "lastName": last_name,
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _register


@pytest.fixture()
def login(client):
    async def _login(email: str, password: str = PASSWORD) -> Dict[str, str]:
        response = await client.post("/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}
    return _login


@pytest.fixture()
async def doctor_headers(register, login):
    await register("doctor@afyascribe.co.ke")
    return await login("doctor@afyascribe.co.ke")


@pytest.fixture()
async def admin_headers(register, login):
    await register("admin@afyascribe.co.ke", role="admin", first_name="Baraka", last_name="Mutiso")
    return await login("admin@afyascribe.co.ke")


@pytest.fixture()
async def seeded_patients(client, doctor_headers):
    response = await client.post("/patients/dev/seed", headers=doctor_headers)
    assert response.status_code == 200
    response = await client.get("/patients", params={"limit": 100}, headers=doctor_headers)
    return response.json()["data"]


@pytest.fixture()
async def seeded_codes(client, doctor_headers):
    response = await client.post("/icd10/seed", headers=doctor_headers)
    assert response.status_code == 200
    return response.json()
