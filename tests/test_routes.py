import httpx
from fastapi.testclient import TestClient

from conftest import FakeSource, te_row
from econ_compare.config import Settings
from econ_compare.main import create_app

SETTINGS = Settings(
    inter_call_delay_ms=0,
    indicators=("GDP", "Population"),
    upstream_api_key="very-secret",
    upstream_base_url="https://te.test",
)


def _source():
    return FakeSource(
        data={
            ("Sweden", "GDP"): [te_row("2022-12-31", 585.9), te_row("2023-12-31", 593.3)],
            ("Mexico", "GDP"): [te_row("2023-12-31", 1788.9)],
        },
        failing={("Mexico", "Population")},
    )


def test_healthz():
    with TestClient(create_app(SETTINGS, source=_source())) as client:
        assert client.get("/healthz").json() == {"status": "ok"}


def test_countries_lists_indicators_with_units():
    with TestClient(create_app(SETTINGS, source=_source())) as client:
        body = client.get("/v1/countries").json()
    assert body["countries"] == ["Mexico", "New Zealand", "Sweden", "Thailand"]
    assert body["indicators"] == [
        {"name": "GDP", "unit": "USD Billion"},
        {"name": "Population", "unit": "Million"},
    ]


def test_history_marks_failed_indicators():
    with TestClient(create_app(SETTINGS, source=_source())) as client:
        body = client.get("/v1/history", params={"country": "Mexico"}).json()
    assert body["country"] == "Mexico"
    assert body["indicators"]["Population"] == "Error"
    assert body["indicators"]["GDP"][0]["Value"] == 1788.9


def test_latest_and_blank_country():
    src = _source()
    with TestClient(create_app(SETTINGS, source=src)) as client:
        assert client.get("/v1/latest", params={"country": "Sweden"}).json()["latest"] == {
            "GDP": 593.3,
            "Population": 1.5,
        }
        assert client.get("/v1/latest", params={"country": ""}).json()["latest"] == {
            "GDP": None,
            "Population": None,
        }
    assert len(src.calls) == 2


def test_latest_table():
    with TestClient(create_app(SETTINGS, source=_source())) as client:
        rows = client.get("/v1/latest-table", params={"country1": "Sweden", "country2": "Mexico"}).json()["rows"]
    assert rows[0]["indicator"] == "GDP"
    assert round(rows[0]["difference"], 1) == -1195.6
    assert rows[1]["country2"] is None


def test_compare_rows():
    with TestClient(create_app(SETTINGS, source=_source())) as client:
        body = client.get(
            "/v1/compare", params={"country1": "Sweden", "country2": "Mexico", "indicator": "GDP"}
        ).json()
    assert body["rows"] == [
        {"date": "2022-12-31", "country1": 585.9, "country2": None},
        {"date": "2023-12-31", "country1": 593.3, "country2": 1788.9},
    ]


def test_compare_rejects_unknown_indicator():
    with TestClient(create_app(SETTINGS, source=_source())) as client:
        r = client.get("/v1/compare", params={"country1": "Sweden", "country2": "Mexico", "indicator": "Vibes"})
    assert r.status_code == 422


def test_proxy_passes_data_through_and_hides_key():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[te_row("2023-12-31", 2.0)])

    app = create_app(SETTINGS, transport=httpx.MockTransport(handler))
    with TestClient(app) as client:
        r = client.get("/api/proxy", params={"country": "sweden", "indicator": "gdp"})
    assert r.status_code == 200
    assert r.json()[0]["Value"] == 2.0
    assert seen[0].url.params["c"] == "very-secret"
    assert "very-secret" not in r.text


def test_proxy_failure_returns_500():
    app = create_app(SETTINGS, transport=httpx.MockTransport(lambda request: httpx.Response(429)))
    with TestClient(app) as client:
        r = client.get("/api/proxy", params={"country": "sweden", "indicator": "gdp"})
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to fetch data from external API"}


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("TTL_SECONDS", "60")
    monkeypatch.setenv("INTER_CALL_DELAY_MS", "1000")
    monkeypatch.setenv("INDICATOR_SET", "GDP, Inflation Rate")
    monkeypatch.setenv("UPSTREAM_API_KEY", "k")
    s = Settings.from_env()
    assert s.ttl_seconds == 60
    assert s.inter_call_delay_sec == 1.0
    assert s.indicators == ("GDP", "Inflation Rate")
    assert s.upstream_api_key == "k"
    assert "upstream_api_key" not in repr(s)


def test_routes_echo_canonical_country_names():
    with TestClient(create_app(SETTINGS, source=_source())) as client:
        latest = client.get("/v1/latest", params={"country": "sweden"}).json()
        history = client.get("/v1/history", params={"country": "sweden"}).json()
        table = client.get("/v1/latest-table", params={"country1": "sweden", "country2": "mexico"}).json()
    assert latest["country"] == history["country"] == "Sweden"
    assert (table["country1"], table["country2"]) == ("Sweden", "Mexico")
