def test_unknown_path_is_endpoint_not_found(client):
    r = client.get("/does-not-exist")
    assert r.status_code == 404
    body = r.json()
    body.pop("correlation_id", None)
    assert body == {"success": False, "error": "Endpoint not found", "code": "endpoint_not_found"}


def test_wrong_method_on_known_path_is_endpoint_not_found(client):
    r = client.post("/get-score")
    assert r.status_code == 404
    assert r.json()["error"] == "Endpoint not found"

    r = client.get("/update-score")
    assert r.status_code == 404


def test_cors_preflight_allows_configured_origin(client):
    r = client.options(
        "/update-score",
        headers={
            "Origin": "https://game.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] in ("*", "https://game.example")


def test_cors_headers_on_simple_request(client):
    r = client.get("/health", headers={"Origin": "https://game.example"})
    assert r.status_code == 200
    assert "access-control-allow-origin" in r.headers
