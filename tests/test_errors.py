import json
import sqlite3

from sqlalchemy.exc import DBAPIError
from starlette.requests import Request

from app.shared.exception_handlers import database_exception_handler, db_error_code
from app.shared.pagination import build_meta


class FakePgError(Exception):
    def __init__(self, sqlstate):
        super().__init__("constraint violated")
        self.sqlstate = sqlstate


def make_request(path="/soap-notes"):
    return Request({
        "type": "http",
        "method": "POST",
        "path": path,
        "headers": [],
        "query_string": b"",
        "scheme": "http",
        "server": ("test", 80),
    })


def db_error(orig):
    return DBAPIError("INSERT INTO soap_notes ...", {}, orig)


async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert set(body) == {"statusCode", "timestamp", "path", "error", "message"}
    assert body["path"] == "/does-not-exist"
    assert body["error"] == "Not Found"


async def test_health_check(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_db_error_code_reads_postgres_sqlstate():
    assert db_error_code(db_error(FakePgError("23505"))) == "23505"


def test_db_error_code_translates_sqlite_messages():
    orig = sqlite3.IntegrityError("UNIQUE constraint failed: patients.patient_id")
    assert db_error_code(db_error(orig)) == "23505"

    orig = sqlite3.IntegrityError("FOREIGN KEY constraint failed")
    assert db_error_code(db_error(orig)) == "23503"

    assert db_error_code(db_error(sqlite3.OperationalError("database is locked"))) is None


async def test_constraint_violations_map_to_client_errors():
    cases = {
        "23505": (409, "Duplicate Entry"),
        "23503": (400, "Foreign Key Violation"),
        "23502": (400, "Missing Required Field"),
        "40001": (500, "Database Error"),
    }
    for code, (status_code, error) in cases.items():
        response = await database_exception_handler(make_request(), db_error(FakePgError(code)))

        body = json.loads(response.body)
        assert response.status_code == status_code
        assert body["statusCode"] == status_code
        assert body["error"] == error
        assert body["path"] == "/soap-notes"


def test_build_meta():
    assert build_meta(total=21, page=3, limit=10) == {
        "total": 21,
        "page": 3,
        "limit": 10,
        "total_pages": 3,
        "has_next_page": False,
        "has_previous_page": True,
    }
    assert build_meta(total=0, page=1, limit=10)["total_pages"] == 0
