"""Service directory routes: CRUD, search/filter, hidden services, stats, checks."""

from homelab_api import probes
from homelab_api.models import ServiceStatus


def _names(resp):
    return [s["name"] for s in resp.json()["services"]]


def test_create_service_defaults(make_service) -> None:
    svc = make_service(port="", location="  ", icon=None)
    assert svc["id"] > 0
    assert svc["status"] == "unknown"
    assert svc["last_checked"] is None
    assert svc["hidden"] is False
    assert svc["port"] is None
    assert svc["location"] is None
    assert svc["created_at"] is not None


def test_create_service_rejects_missing_fields_and_bad_url(client) -> None:
    assert client.post("/api/v1/services", json={"name": "x", "category": "VPS"}).status_code == 422
    resp = client.post("/api/v1/services", json={"name": "x", "url": "ftp://nas", "category": "VPS"})
    assert resp.status_code == 422
    resp = client.post("/api/v1/services", json={"name": "", "url": "http://a", "category": "VPS"})
    assert resp.status_code == 422


def test_client_cannot_set_status(client) -> None:
    resp = client.post(
        "/api/v1/services",
        json={"name": "x", "url": "http://a", "category": "VPS", "status": "online"},
    )
    assert resp.status_code == 201
    assert resp.json()["service"]["status"] == "unknown"


def test_get_update_delete_roundtrip(client, make_service) -> None:
    svc = make_service(port="8096")
    url = f"/api/v1/services/{svc['id']}"

    assert client.get(url).json()["service"]["name"] == "Jellyfin"

    resp = client.put(url, json={"name": "Jellyfin 10", "description": ""})
    assert resp.status_code == 200
    updated = resp.json()["service"]
    assert updated["name"] == "Jellyfin 10"
    assert updated["description"] is None
    # fields that were not sent are untouched
    assert updated["port"] == "8096"
    assert updated["provider"] == "Self-hosted"

    assert client.delete(url).json() == {"ok": True, "deleted": svc["id"]}
    assert client.get(url).status_code == 404


def test_update_rejects_null_required_field(client, make_service) -> None:
    svc = make_service()
    resp = client.put(f"/api/v1/services/{svc['id']}", json={"name": None})
    assert resp.status_code == 422


def test_missing_service_is_404(client) -> None:
    assert client.get("/api/v1/services/999").status_code == 404
    assert client.put("/api/v1/services/999", json={"name": "x"}).status_code == 404
    assert client.delete("/api/v1/services/999").status_code == 404
    assert client.post("/api/v1/services/999/check").status_code == 404


def test_search_is_case_insensitive_across_fields(client, make_service) -> None:
    make_service(name="Jellyfin", description="Media server", provider="Self-hosted", category="Docker")
    make_service(name="Pi-hole", description="DNS sinkhole", provider="Raspberry Pi", category="Network")
    make_service(name="Hetzner box", description=None, provider="HETZNER", category="VPS")

    assert _names(client.get("/api/v1/services", params={"search": "MEDIA"})) == ["Jellyfin"]
    assert _names(client.get("/api/v1/services", params={"search": "hetzner"})) == ["Hetzner box"]
    assert _names(client.get("/api/v1/services", params={"search": "netw"})) == ["Pi-hole"]
    assert _names(client.get("/api/v1/services", params={"search": "  pi  "})) == ["Pi-hole"]
    assert len(client.get("/api/v1/services", params={"search": "   "}).json()["services"]) == 3


def test_search_treats_wildcards_literally(client, make_service) -> None:
    make_service(name="grafana_dashboards")
    make_service(name="grafanaXdashboards")
    make_service(name="100% uptime")

    assert _names(client.get("/api/v1/services", params={"search": "a_d"})) == ["grafana_dashboards"]
    assert _names(client.get("/api/v1/services", params={"search": "%"})) == ["100% uptime"]


def test_category_filter_and_all(client, make_service) -> None:
    make_service(name="a", category="Docker")
    make_service(name="b", category="VPS")

    assert _names(client.get("/api/v1/services", params={"category": "VPS"})) == ["b"]
    assert _names(client.get("/api/v1/services", params={"category": "All"})) == ["a", "b"]


def test_search_and_category_combine(client, make_service) -> None:
    make_service(name="Grafana", category="Docker")
    make_service(name="Grafana Cloud", category="External")

    resp = client.get("/api/v1/services", params={"search": "grafana", "category": "External"})
    assert _names(resp) == ["Grafana Cloud"]


def test_pagination_and_total(client, make_service) -> None:
    for i in range(5):
        make_service(name=f"svc{i}")

    resp = client.get("/api/v1/services", params={"limit": 2, "offset": 2, "include_total": True})
    body = resp.json()
    assert [s["name"] for s in body["services"]] == ["svc2", "svc3"]
    assert body["total"] == 5
    assert "total" not in client.get("/api/v1/services").json()


def test_hidden_services_are_excluded_by_default(client, make_service) -> None:
    make_service(name="visible")
    hidden = make_service(name="secret", hidden=True)

    assert _names(client.get("/api/v1/services")) == ["visible"]
    assert _names(client.get("/api/v1/services", params={"include_hidden": True})) == ["visible", "secret"]
    assert _names(client.get("/api/v1/services/hidden")) == ["secret"]

    client.put(f"/api/v1/services/{hidden['id']}", json={"hidden": False})
    assert _names(client.get("/api/v1/services/hidden")) == []


def test_stats_counts_unknown_as_offline(client, make_service, monkeypatch) -> None:
    a = make_service(name="a")
    b = make_service(name="b")
    make_service(name="c")
    make_service(name="hidden", hidden=True)

    results = {a["url"]: ServiceStatus.ONLINE}
    monkeypatch.setattr(probes, "probe_url", lambda url, timeout=None: results.get(url, ServiceStatus.WARNING))
    client.post(f"/api/v1/services/{a['id']}/check")
    client.put(f"/api/v1/services/{b['id']}", json={"url": "http://b.lan"})
    client.post(f"/api/v1/services/{b['id']}/check")

    stats = client.get("/api/v1/services/stats").json()["stats"]
    assert stats == {"total": 3, "online": 1, "warning": 1, "offline": 1}


def test_check_persists_status(client, make_service, monkeypatch) -> None:
    svc = make_service()
    monkeypatch.setattr(probes, "probe_url", lambda url, timeout=None: ServiceStatus.OFFLINE)

    resp = client.post(f"/api/v1/services/{svc['id']}/check")
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["status"] == "offline"
    assert result["last_checked"] is not None

    stored = client.get(f"/api/v1/services/{svc['id']}").json()["service"]
    assert stored["status"] == "offline"
    assert stored["last_checked"] is not None
