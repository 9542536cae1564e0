def test_openapi_document_served_as_json(client):
    response = client.get("/openapi.json")

    assert response.status_code == 200
    spec = response.get_json()
    assert spec["openapi"].startswith("3.")
    assert "/workflows" in spec["paths"]
    assert "/workflow-associations/{associationId}" in spec["paths"]
    assert set(spec["paths"]["/workflow-associations/{associationId}"]) >= {"get", "patch", "delete"}


def test_openapi_operation_enum_matches_model(client):
    from workflow_api.core.models import Operation

    spec = client.get("/openapi.json").get_json()
    assert spec["components"]["schemas"]["Operation"]["enum"] == [op.value for op in Operation]


def test_missing_openapi_file_returns_500(app, client, tmp_path):
    app.config["OPENAPI_SPEC_PATH"] = str(tmp_path / "absent.yaml")
    response = client.get("/openapi.json")
    assert response.status_code == 500
    assert response.get_json()["code"] == "WF-65000"


def test_docs_page_references_spec(client):
    response = client.get("/docs")
    assert response.status_code == 200
    assert response.mimetype == "text/html"
    assert b'spec-url="/openapi.json"' in response.data


def test_openapi_servers_follow_mount_point(client):
    spec = client.get("/openapi.json").get_json()
    assert spec["servers"] == [{"url": "/api/server/v1"}]


def test_openapi_document_cached_per_path(app, client, tmp_path):
    document = tmp_path / "api.yaml"
    document.write_text("openapi: 3.0.3\ninfo:\n  title: First\npaths: {}\n", encoding="utf-8")
    app.config["OPENAPI_SPEC_PATH"] = str(document)

    assert client.get("/openapi.json").get_json()["info"]["title"] == "First"
    document.write_text("openapi: 3.0.3\ninfo:\n  title: Second\npaths: {}\n", encoding="utf-8")
    assert client.get("/openapi.json").get_json()["info"]["title"] == "First"


def test_docs_page_title_from_document(app, client, tmp_path):
    document = tmp_path / "api.yaml"
    document.write_text("openapi: 3.0.3\ninfo:\n  title: Tenant <Flows>\npaths: {}\n", encoding="utf-8")
    app.config["OPENAPI_SPEC_PATH"] = str(document)

    response = client.get("/docs")

    assert b"<title>Tenant &lt;Flows&gt; Reference</title>" in response.data
