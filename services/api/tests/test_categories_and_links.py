"""Category management and quick-link routes."""


def test_default_categories_are_seeded_alphabetically(client) -> None:
    names = [c["name"] for c in client.get("/api/v1/categories").json()["categories"]]
    assert names == ["Docker", "External", "Network", "VPS"]


def test_category_crud_and_unique_names(client) -> None:
    resp = client.post("/api/v1/categories", json={"name": "Media", "description": ""})
    assert resp.status_code == 201
    media = resp.json()["category"]
    assert media["color"] == "#3B82F6"
    assert media["description"] is None

    dup = client.post("/api/v1/categories", json={"name": "Media"})
    assert dup.status_code == 409

    clash = client.put(f"/api/v1/categories/{media['id']}", json={"name": "Docker"})
    assert clash.status_code == 409

    renamed = client.put(f"/api/v1/categories/{media['id']}", json={"name": "Streaming", "color": "#FF0000"})
    assert renamed.json()["category"]["name"] == "Streaming"
    assert renamed.json()["category"]["color"] == "#FF0000"

    assert client.delete(f"/api/v1/categories/{media['id']}").status_code == 200
    assert client.get(f"/api/v1/categories/{media['id']}").status_code == 404


def test_quick_link_crud_and_category_filter(client) -> None:
    resp = client.post("/api/v1/quick-links", json={"name": "Router", "url": "http://192.168.1.1"})
    assert resp.status_code == 201
    router = resp.json()["quick_link"]
    assert router["category"] == "General"

    client.post(
        "/api/v1/quick-links",
        json={"name": "Grafana", "url": "http://grafana.lan", "category": "Monitoring", "icon": ""},
    )

    all_links = client.get("/api/v1/quick-links").json()["quick_links"]
    assert [q["name"] for q in all_links] == ["Router", "Grafana"]
    assert all_links[1]["icon"] is None

    monitoring = client.get("/api/v1/quick-links", params={"category": "Monitoring"}).json()["quick_links"]
    assert [q["name"] for q in monitoring] == ["Grafana"]

    updated = client.put(f"/api/v1/quick-links/{router['id']}", json={"description": "Main gateway"})
    assert updated.json()["quick_link"]["description"] == "Main gateway"
    assert updated.json()["quick_link"]["url"] == "http://192.168.1.1"

    assert client.delete(f"/api/v1/quick-links/{router['id']}").status_code == 200
    assert client.get(f"/api/v1/quick-links/{router['id']}").status_code == 404
    assert client.delete(f"/api/v1/quick-links/{router['id']}").status_code == 404


def test_category_null_or_blank_color_uses_default(client) -> None:
    created = client.post("/api/v1/categories", json={"name": "Storage", "color": None}).json()["category"]
    assert created["color"] == "#3B82F6"

    client.put(f"/api/v1/categories/{created['id']}", json={"color": "#000000"})
    reset = client.put(f"/api/v1/categories/{created['id']}", json={"color": ""}).json()["category"]
    assert reset["color"] == "#3B82F6"
