from tests.notice_helpers import create_user, extract_dismiss_form, login_headers


def test_metrics_expose_notice_counters(client, db_session):
    create_user(db_session, username="alice")
    alice = login_headers(client, "alice")
    html = client.get("/admin/notices", headers=alice).text
    form = extract_dismiss_form(html, "welcome")
    client.post(
        "/admin/admin-ajax",
        content="&".join(f"{key}={value}" for key, value in form.items()),
        headers={**alice, "Content-Type": "application/x-www-form-urlencoded"},
    )

    response = client.get("/ops/metrics")

    assert response.status_code == 200
    body = response.text
    assert "notices_rendered_total" in body
    assert 'notice_dismissals_total{scope="global"}' in body
    assert "http_requests_total" in body
