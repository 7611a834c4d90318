"""Feature catalog HTTP API tests"""


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_requires_authentication(client, db_session):
    response = client.get("/features")
    assert response.status_code in (401, 403)


def test_rejects_invalid_token(client, db_session):
    response = client.get("/features", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_create_and_get_feature(admin_client, admin_user, feature_data):
    response = admin_client.post("/features", json=feature_data)
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "video_call"
    assert body["is_enabled"] is True
    assert body["version"] == "1.0.0"
    assert body["created_by"] == str(admin_user.id)
    assert body["pricing"] == {"monthly": 9.0, "yearly": 90.0}
    assert body["permissions"] == {"roles": [], "organizations": []}
    assert "id" in body and "last_updated" in body

    response = admin_client.get("/features/video_call")
    assert response.status_code == 200
    assert response.json() == body


def test_create_duplicate_returns_409(admin_client, feature_data):
    assert admin_client.post("/features", json=feature_data).status_code == 201
    response = admin_client.post("/features", json=dict(feature_data, description="changed"))
    assert response.status_code == 409
    assert admin_client.get("/features/video_call").json()["description"] == feature_data["description"]


def test_create_validation_errors_return_400(admin_client, feature_data):
    response = admin_client.post("/features", json=dict(feature_data, category="gaming"))
    assert response.status_code == 400

    missing = dict(feature_data)
    missing.pop("display_name")
    response = admin_client.post("/features", json=missing)
    assert response.status_code == 400
    assert any(err["field"].endswith("display_name") for err in response.json()["errors"])

    response = admin_client.post("/features", json=dict(feature_data, dependencies=["nonexistent"]))
    assert response.status_code == 400


def test_member_cannot_modify_catalog(client, admin_headers, member_headers, feature_data):
    response = client.post("/features", json=feature_data, headers=member_headers)
    assert response.status_code == 403

    client.post("/features", json=feature_data, headers=admin_headers)
    response = client.patch("/features/video_call", json={"version": "2.0.0"}, headers=member_headers)
    assert response.status_code == 403
    response = client.delete("/features/video_call", headers=member_headers)
    assert response.status_code == 403

    # Reads are fine
    response = client.get("/features/video_call", headers=member_headers)
    assert response.status_code == 200


def test_get_missing_feature_returns_404(admin_client):
    response = admin_client.get("/features/ghost")
    assert response.status_code == 404
    assert response.json()["detail"] == "Feature 'ghost' not found"


def test_list_filters(admin_client, feature_data):
    admin_client.post("/features", json=feature_data)
    admin_client.post("/features", json={
        "name": "kanban", "display_name": "Kanban", "description": "Boards",
    })
    admin_client.post("/features", json={
        "name": "slack_integration", "display_name": "Slack", "description": "Slack sync",
        "category": "integration", "is_enabled": False,
    })

    names = [f["name"] for f in admin_client.get("/features").json()]
    assert names == ["video_call", "kanban", "slack_integration"]

    names = [f["name"] for f in admin_client.get("/features", params={"category": "collaboration"}).json()]
    assert names == ["video_call"]

    names = [f["name"] for f in admin_client.get("/features", params={"enabled": "true"}).json()]
    assert names == ["video_call", "kanban"]

    names = [f["name"] for f in admin_client.get("/features", params={"order_by": "name"}).json()]
    assert names == ["kanban", "slack_integration", "video_call"]

    assert admin_client.get("/features", params={"category": "gaming"}).status_code == 400


def test_patch_feature(admin_client, feature_data):
    created = admin_client.post("/features", json=feature_data).json()

    response = admin_client.patch("/features/video_call", json={"pricing": {"monthly": 12}})
    assert response.status_code == 200
    body = response.json()
    assert body["pricing"] == {"monthly": 12.0, "yearly": 90.0}
    assert body["description"] == created["description"]
    assert body["last_updated"] > created["last_updated"]


def test_patch_errors(admin_client, feature_data):
    admin_client.post("/features", json=feature_data)
    assert admin_client.patch("/features/video_call", json={"category": "gaming"}).status_code == 400
    assert admin_client.patch("/features/video_call", json={"name": "renamed"}).status_code == 400
    assert admin_client.patch("/features/ghost", json={"description": "x"}).status_code == 404


def test_enable_toggle_scenario(admin_client, feature_data):
    admin_client.post("/features", json=feature_data)

    response = admin_client.put("/features/video_call/enabled", json={"is_enabled": False})
    assert response.status_code == 200
    assert response.json()["is_enabled"] is False

    enabled = admin_client.get("/features", params={"enabled": "true"}).json()
    assert "video_call" not in [f["name"] for f in enabled]

    assert admin_client.put("/features/ghost/enabled", json={"is_enabled": True}).status_code == 404


def test_delete_with_dependents_scenario(admin_client, feature_data):
    admin_client.post("/features", json=feature_data)
    response = admin_client.post("/features", json={
        "name": "ai_assistant",
        "display_name": "AI Assistant",
        "description": "Meeting summaries",
        "category": "ai",
        "dependencies": ["video_call"],
    })
    assert response.status_code == 201

    assert admin_client.get("/features/video_call/dependents").json() == ["ai_assistant"]

    response = admin_client.delete("/features/video_call")
    assert response.status_code == 409
    assert "ai_assistant" in response.json()["detail"]

    admin_client.patch("/features/ai_assistant", json={"dependencies": []})
    response = admin_client.delete("/features/video_call")
    assert response.status_code == 204
    assert admin_client.get("/features/video_call").status_code == 404
    assert admin_client.delete("/features/video_call").status_code == 404


def test_access_check(client, admin_headers, member_headers, organization):
    client.post("/features", headers=admin_headers, json={
        "name": "analytics",
        "display_name": "Analytics",
        "description": "Dashboards",
        "category": "analytics",
        "permissions": {"roles": ["project_manager"], "organizations": [str(organization.id)]},
    })

    # Defaults to the caller's own role and organization
    response = client.get("/features/analytics/access", headers=member_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "member"
    assert body["org_id"] == str(organization.id)
    assert body["allowed"] is False
    assert body["reason"] == "role_not_permitted"

    response = client.get(
        "/features/analytics/access",
        params={"role": "project_manager", "org_id": str(organization.id)},
        headers=member_headers,
    )
    assert response.json()["allowed"] is True

    response = client.get("/features/analytics/access", params={"role": "wizard"}, headers=member_headers)
    assert response.status_code == 400


def test_login_issues_usable_token(client, admin_user):
    response = client.post("/auth/login", json={"email": "ADMIN@projectra.local ", "password": "password123"})
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["role"] == "projectra_admin"


def test_login_with_invalid_credentials(client, admin_user):
    response = client.post("/auth/login", json={"email": "admin@projectra.local", "password": "wrong"})
    assert response.status_code == 401


def test_login_without_credentials(client, db_session):
    response = client.post("/auth/login", json={})
    assert response.status_code == 400
