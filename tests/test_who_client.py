import httpx
import pytest

from app.icd10system.who_client import WhoApiError, WhoIcdClient, _text_value
from config.icd10config import icd10_settings


@pytest.fixture()
def credentials(monkeypatch):
    monkeypatch.setattr(icd10_settings, "ICD10_CLIENT_ID", "client-id")
    monkeypatch.setattr(icd10_settings, "ICD10_CLIENT_SECRET", "client-secret")


def make_client(routes, expires_in=3600):
    """WHO client backed by a mock transport. `routes` maps URL path suffixes to responses."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "POST":
            return httpx.Response(200, json={"access_token": f"token-{len(requests)}", "expires_in": expires_in})
        for suffix, response in routes.items():
            if request.url.path.endswith(suffix):
                return response
        return httpx.Response(404)

    return WhoIcdClient(transport=httpx.MockTransport(handler)), requests


def test_text_value_handles_both_title_shapes():
    assert _text_value({"@language": "en", "@value": "Cholera"}) == "Cholera"
    assert _text_value("<em class='found'>Chol</em>era ") == "Cholera"
    assert _text_value(None) == ""


async def test_authenticate_without_credentials_fails():
    client, requests = make_client({})

    with pytest.raises(WhoApiError):
        await client.authenticate()
    assert requests == []


async def test_token_request_uses_client_credentials(credentials):
    client, requests = make_client({})

    token = await client.authenticate()

    assert token == "token-1"
    assert client.token_is_valid()
    body = requests[0].content.decode()
    assert "grant_type=client_credentials" in body
    assert "scope=icdapi_access" in body


async def test_failed_authentication_raises(credentials):
    client = WhoIcdClient(transport=httpx.MockTransport(lambda request: httpx.Response(401)))

    with pytest.raises(WhoApiError):
        await client.authenticate()
    assert not client.has_token


async def test_token_is_reused_until_it_nears_expiry(credentials):
    client, requests = make_client({"/I10": httpx.Response(200, json={"title": "Essential (primary) hypertension"})})

    await client.fetch_code("I10")
    await client.fetch_code("I10")

    assert [r.method for r in requests] == ["POST", "GET", "GET"]
    assert requests[2].headers["Authorization"] == "Bearer token-1"
    assert requests[2].headers["API-Version"] == "v2"


async def test_short_lived_token_is_refreshed(credentials):
    # expires_in below the refresh margin means the token is stale immediately
    client, requests = make_client({"/I10": httpx.Response(200, json={"title": "Hypertension"})}, expires_in=60)

    await client.fetch_code("I10")
    await client.fetch_code("I10")

    assert [r.method for r in requests] == ["POST", "GET", "POST", "GET"]


async def test_fetch_code_reads_title_and_definition(credentials):
    client, _ = make_client({
        "/B54": httpx.Response(200, json={
            "title": {"@language": "en", "@value": "Unspecified malaria"},
            "definition": {"@language": "en", "@value": "Clinically diagnosed malaria without parasitological confirmation"},
        }),
        "/R51": httpx.Response(200, json={"title": "Headache"}),
    })

    malaria = await client.fetch_code("B54")
    assert malaria == {
        "code": "B54",
        "short_description": "Unspecified malaria",
        "long_description": "Clinically diagnosed malaria without parasitological confirmation",
    }

    headache = await client.fetch_code("R51")
    assert headache["long_description"] == "Headache"


async def test_fetch_code_returns_none_on_failure(credentials):
    client, _ = make_client({
        "/A00": httpx.Response(500),
        "/A01": httpx.Response(200, json={"title": ""}),
    })

    assert await client.fetch_code("A00") is None
    assert await client.fetch_code("A01") is None
    assert await client.fetch_code("Q99") is None


async def test_fetch_code_without_credentials_returns_none():
    client, requests = make_client({})

    assert await client.fetch_code("I10") is None
    assert requests == []


async def test_search_keeps_valid_icd10_codes_only(credentials):
    client, requests = make_client({
        "/mms/search": httpx.Response(200, json={"destinationEntities": [
            {"theCode": "A00.9", "title": "<em class='found'>Cholera</em>, unspecified"},
            {"theCode": "1A00", "title": "Cholera"},
            {"code": "a01.0", "title": {"@value": "Typhoid fever"}},
            {"theCode": "A00.9", "title": "Cholera again"},
            {"theCode": "A02", "title": ""},
        ]}),
    })

    results = await client.search("cholera", limit=10)

    assert [r["code"] for r in results] == ["A00.9", "A01.0"]
    assert results[0]["short_description"] == "Cholera, unspecified"
    assert requests[1].url.params["q"] == "cholera"
    assert requests[1].url.params["flatResults"] == "true"


async def test_search_honours_limit_and_failures(credentials):
    client, _ = make_client({
        "/mms/search": httpx.Response(200, json={"destinationEntities": [
            {"theCode": "B50", "title": "Falciparum malaria"},
            {"theCode": "B51", "title": "Vivax malaria"},
        ]}),
    })
    assert len(await client.search("malaria", limit=1)) == 1

    broken = WhoIcdClient(transport=httpx.MockTransport(
        lambda request: httpx.Response(200, json={"access_token": "t"}) if request.method == "POST"
        else httpx.Response(503)
    ))
    assert await broken.search("malaria", limit=5) == []


async def test_refresh_token_only_after_first_login(credentials):
    client, requests = make_client({})

    await client.refresh_token()
    assert requests == []

    await client.authenticate()
    await client.refresh_token()
    assert [r.method for r in requests] == ["POST", "POST"]
    assert client.token_is_valid()
