"""HTTP API through the Flask test client."""

from __future__ import annotations

import re
from datetime import timedelta

from spendsmart.clock import today, utcnow


def _month() -> str:
    return utcnow().strftime("%Y-%m")


def test_register_login_and_me(client, auth_headers):
    headers = auth_headers()

    response = client.get("/api/users/me", headers=headers)

    assert response.status_code == 200
    assert response.get_json()["user"]["email"] == "ana@example.com"


def test_duplicate_registration_conflicts(client):
    payload = {"email": "ana@example.com", "full_name": "Ana Tester", "password": "s3cret-pass"}
    assert client.post("/api/users/register", json=payload).status_code == 201

    response = client.post("/api/users/register", json=payload)

    assert response.status_code == 409
    assert response.get_json()["message"] == "Email is already registered"


def test_protected_routes_require_token(client):
    assert client.get("/api/budgets/").status_code == 401
    response = client.get("/api/budgets/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert "message" in response.get_json()


def test_validation_errors_carry_field_messages(client, auth_headers):
    response = client.post(
        "/api/budgets/",
        json={"category_id": "x", "month": "2024-13", "limit": -1, "threshold": 101},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert set(response.get_json()["errors"]) == {"category_id", "month", "limit", "threshold"}


def test_huge_amounts_are_rejected_not_server_errors(client, auth_headers, category_id):
    headers = auth_headers()

    transaction = client.post(
        "/api/transactions/",
        json={"type": "expense", "amount": "1e30", "date": "2024-06-01", "category_id": category_id},
        headers=headers,
    )
    budget = client.post(
        "/api/budgets/",
        json={"category_id": category_id, "month": _month(), "limit": 1e30, "threshold": 80},
        headers=headers,
    )

    assert transaction.status_code == 400
    assert list(transaction.get_json()["errors"]) == ["amount"]
    assert budget.status_code == 400
    assert list(budget.get_json()["errors"]) == ["limit"]


def test_budget_lifecycle(client, auth_headers, category_id):
    headers = auth_headers()

    created = client.post(
        "/api/budgets/",
        json={"category_id": category_id, "month": _month(), "limit": 100, "threshold": 50},
        headers=headers,
    )
    assert created.status_code == 200
    budget = created.get_json()["budget"]
    assert budget["isActive"] is True

    client.post(
        "/api/transactions/",
        json={"type": "expense", "amount": 60, "date": utcnow().isoformat(), "category_id": category_id},
        headers=headers,
    )

    listed = client.get("/api/budgets/", headers=headers).get_json()["budgets"]
    assert listed == [
        {
            "_id": budget["_id"],
            "category": "Food",
            "month": _month(),
            "limit": 100.0,
            "threshold": 50.0,
            "isActive": True,
            "spent": 60.0,
            "available": 40.0,
            "percentUsed": 60.0,
            "alert": True,
        }
    ]

    toggled = client.patch(f"/api/budgets/{budget['_id']}/toggle", headers=headers).get_json()
    assert toggled["message"] == "Budget deactivated"
    assert toggled["budget"]["isActive"] is False

    deleted = client.delete(f"/api/budgets/{budget['_id']}", headers=headers)
    assert deleted.status_code == 200
    assert client.delete(f"/api/budgets/{budget['_id']}", headers=headers).status_code == 404


def test_budget_cap_returns_conflict(client, auth_headers, category_id):
    headers = auth_headers()
    for month in range(1, 11):
        response = client.post(
            "/api/budgets/",
            json={"category_id": category_id, "month": f"2030-{month:02d}", "limit": 10, "threshold": 80},
            headers=headers,
        )
        assert response.status_code == 200

    response = client.post(
        "/api/budgets/",
        json={"category_id": category_id, "month": "2030-11", "limit": 10, "threshold": 80},
        headers=headers,
    )

    assert response.status_code == 409


def test_expense_over_threshold_emails_owner(client, auth_headers, category_id, fake_mailer):
    headers = auth_headers()
    client.post(
        "/api/budgets/",
        json={"category_id": category_id, "month": _month(), "limit": 100, "threshold": 80},
        headers=headers,
    )

    response = client.post(
        "/api/transactions/",
        json={"type": "expense", "amount": 85, "date": utcnow().isoformat(), "category_id": category_id},
        headers=headers,
    )

    assert response.status_code == 201
    assert [message["to"] for message in fake_mailer.sent] == ["ana@example.com"]
    assert "85.0%" in fake_mailer.sent[0]["text"]


def test_mail_failure_does_not_fail_transaction(client, auth_headers, category_id, fake_mailer):
    headers = auth_headers()
    fake_mailer.fail = True
    client.post(
        "/api/budgets/",
        json={"category_id": category_id, "month": _month(), "limit": 10, "threshold": 10},
        headers=headers,
    )

    response = client.post(
        "/api/transactions/",
        json={"type": "expense", "amount": 50, "date": utcnow().isoformat(), "category_id": category_id},
        headers=headers,
    )

    assert response.status_code == 201
    assert fake_mailer.sent == []


def test_transaction_update_filter_and_delete(client, auth_headers, category_id):
    headers = auth_headers()
    created = client.post(
        "/api/transactions/",
        json={"type": "expense", "amount": 12.5, "date": "2024-06-02", "category_id": category_id},
        headers=headers,
    ).get_json()["transaction"]

    updated = client.put(
        f"/api/transactions/{created['_id']}", json={"amount": 20}, headers=headers
    ).get_json()["transaction"]
    assert updated["amount"] == 20.0

    filtered = client.post(
        "/api/transactions/filter",
        json={"type": "expense", "start_date": "2024-06-01", "end_date": "2024-06-02"},
        headers=headers,
    ).get_json()["transactions"]
    assert [row["_id"] for row in filtered] == [created["_id"]]

    assert client.delete(f"/api/transactions/{created['_id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/transactions/{created['_id']}", headers=headers).status_code == 404


def test_users_cannot_see_each_others_data(client, auth_headers, category_id):
    owner = auth_headers("owner@example.com")
    intruder = auth_headers("intruder@example.com")
    created = client.post(
        "/api/transactions/",
        json={"type": "expense", "amount": 5, "date": "2024-06-02", "category_id": category_id},
        headers=owner,
    ).get_json()["transaction"]

    response = client.put(f"/api/transactions/{created['_id']}", json={"amount": 1}, headers=intruder)

    assert response.status_code == 404


def test_savings_goal_flow(client, auth_headers):
    headers = auth_headers()
    due = (today() + timedelta(days=120)).isoformat()

    created = client.post(
        "/api/savings/",
        json={"name": "Vacation", "target_amount": 1000, "due_date": due},
        headers=headers,
    )
    assert created.status_code == 201
    goal = created.get_json()["goal"]
    assert goal["current_amount"] == 0.0

    duplicate = client.post(
        "/api/savings/",
        json={"name": "Vacation", "target_amount": 10, "due_date": due},
        headers=headers,
    )
    assert duplicate.status_code == 409

    added = client.patch(
        f"/api/savings/{goal['_id']}/add-money", json={"amount": 1200}, headers=headers
    ).get_json()["goal"]
    assert added["current_amount"] == 1000.0
    assert added["completed"] is True

    listed = client.get("/api/savings/", headers=headers).get_json()["goals"]
    assert listed[0]["progress"] == 100.0
    assert listed[0]["monthly_quota"] == 0.0

    renamed = client.put(
        f"/api/savings/{goal['_id']}", json={"name": "Summer trip"}, headers=headers
    ).get_json()["goal"]
    assert renamed["name"] == "Summer trip"

    assert client.delete(f"/api/savings/{goal['_id']}", headers=headers).status_code == 200
    assert client.get("/api/savings/", headers=headers).get_json()["goals"] == []


def test_summary_endpoint(client, auth_headers, app):
    headers = auth_headers()
    salary_id = app.extensions["spendsmart"].category_repo.get_by_name("Salary").id
    client.post(
        "/api/transactions/",
        json={"type": "income", "amount": 2000, "date": "2024-06-01", "category_id": salary_id},
        headers=headers,
    )
    client.post(
        "/api/transactions/",
        json={"type": "expense", "amount": 150, "date": "2024-06-05"},
        headers=headers,
    )

    payload = client.get("/api/summary/?month=2024-06", headers=headers).get_json()

    assert payload["monthlyIncome"] == 2000.0
    assert payload["monthlyExpense"] == 150.0
    assert payload["monthlySavings"] == 1850.0
    assert payload["totalBalance"] == 1850.0
    assert payload["closestGoal"] == {"name": "No active goals"}
    assert [row["category"] for row in payload["recentTransactions"]] == ["Uncategorized", "Salary"]

    assert client.get("/api/summary/?month=2024-13", headers=headers).status_code == 400
    missing = client.get("/api/summary/", headers=headers)
    assert missing.status_code == 400
    assert missing.get_json()["message"] == "Month is required"


def test_categories_endpoint(client, auth_headers):
    headers = auth_headers()

    expense = client.get("/api/categories/?type=expense", headers=headers).get_json()["categories"]
    assert "Dining Out" in [item["name"] for item in expense]

    food_id = next(item["_id"] for item in expense if item["name"] == "Food")
    assert client.get(f"/api/categories/{food_id}", headers=headers).get_json()["category"]["name"] == "Food"
    assert client.get("/api/categories/9999", headers=headers).status_code == 404


def test_categories_cannot_be_created_over_http(client, auth_headers, app):
    registry = app.extensions["spendsmart"].category_repo
    before = registry.count()

    response = client.post("/api/categories/", json={"name": "Pets", "type": "expense"}, headers=auth_headers())

    assert response.status_code == 405
    assert registry.count() == before
    assert registry.get_by_name("Pets") is None


def test_alert_preference_endpoint(client, auth_headers):
    headers = auth_headers()

    response = client.patch("/api/users/me", json={"alerts_enabled": False}, headers=headers)

    assert response.get_json()["user"]["alerts_enabled"] is False


def test_profile_update_endpoint(client, auth_headers):
    headers = auth_headers()

    response = client.put(
        "/api/users/me", json={"country": "Chile", "bio": "Saving for a bike"}, headers=headers
    )

    assert response.status_code == 200
    user = response.get_json()["user"]
    assert user["country"] == "Chile"
    assert user["bio"] == "Saving for a bike"
    assert user["full_name"] == "Ana Tester"
    bad = client.put("/api/users/me", json={"birthdate": "not-a-date"}, headers=headers)
    assert bad.status_code == 400


def test_change_password_endpoint(client, auth_headers):
    headers = auth_headers()

    wrong = client.put(
        "/api/users/me/password",
        json={"current_password": "nope-nope", "new_password": "another-pass"},
        headers=headers,
    )
    reused = client.put(
        "/api/users/me/password",
        json={"current_password": "s3cret-pass", "new_password": "s3cret-pass"},
        headers=headers,
    )
    changed = client.put(
        "/api/users/me/password",
        json={"current_password": "s3cret-pass", "new_password": "another-pass"},
        headers=headers,
    )

    assert wrong.status_code == 401
    assert reused.status_code == 409
    assert changed.status_code == 200
    login = client.post("/api/users/login", json={"email": "ana@example.com", "password": "another-pass"})
    assert login.status_code == 200


def test_forgot_and_reset_password_flow(client, auth_headers, fake_mailer):
    auth_headers()

    unknown = client.post("/api/users/forgot-password", json={"email": "ghost@example.com"})
    sent = client.post("/api/users/forgot-password", json={"email": "ana@example.com"})
    code = re.search(r"\b(\d{6})\b", fake_mailer.sent[-1]["text"]).group(1)
    reset = client.post(
        "/api/users/reset-password",
        json={"email": "ana@example.com", "code": code, "password": "recovered-pass"},
    )
    replay = client.post(
        "/api/users/reset-password",
        json={"email": "ana@example.com", "code": code, "password": "second-pass"},
    )

    assert unknown.status_code == 404
    assert sent.status_code == 200
    assert reset.status_code == 200
    assert replay.status_code == 400
    login = client.post("/api/users/login", json={"email": "ana@example.com", "password": "recovered-pass"})
    assert login.status_code == 200


def test_forgot_password_mail_failure_is_a_server_error(client, auth_headers, fake_mailer):
    auth_headers()
    fake_mailer.fail = True

    response = client.post("/api/users/forgot-password", json={"email": "ana@example.com"})

    assert response.status_code == 500


def test_refresh_token_cookie_issues_new_access_token(client, auth_headers):
    auth_headers()
    assert client.get_cookie("refresh_token") is not None

    response = client.post("/api/users/refresh-token")

    assert response.status_code == 200
    token = response.get_json()["token"]
    assert client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"}).status_code == 200

    client.delete_cookie("refresh_token")
    assert client.post("/api/users/refresh-token").status_code == 401


def test_unknown_route_is_json_404(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert "message" in response.get_json()


def test_seed_categories_cli(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["seed-categories", "--force"])

    assert result.exit_code == 0
    assert "Categories created: 0" in result.output
