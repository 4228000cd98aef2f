def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_request_id_is_echoed_or_generated(client):
    r = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert r.headers["X-Request-ID"] == "abc123"
    assert client.get("/health").headers["X-Request-ID"]


def test_metrics_exposes_domain_counters(client):
    r = client.get("/metrics")
    assert r.status_code == 200
    for name in (
        "paintperfect_requests_created_total",
        "paintperfect_checkout_items_total",
        "paintperfect_uploads_total",
        "paintperfect_vendor_approvals_total",
    ):
        assert name in r.text
