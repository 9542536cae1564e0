import pytest
from flask import Flask, abort

from workflow_api.api.errors import register_error_handlers
from workflow_api.core.errors import ErrorMessage, ServerFault


@pytest.fixture()
def flask_client():
    app = Flask(__name__)
    app.config["TESTING"] = True
    app.config["MAX_CONTENT_LENGTH"] = 16

    register_error_handlers(app)

    @app.route("/crash")
    def crash():
        raise RuntimeError("boom")

    @app.route("/fault")
    def fault():
        raise ServerFault.from_error(ErrorMessage.ERROR_CODE_ERROR_LISTING_WORKFLOWS)

    @app.route("/teapot")
    def teapot():
        abort(418)

    @app.route("/upload", methods=["POST"])
    def upload():
        from flask import request
        return {"size": len(request.get_data())}

    with app.test_client() as client:
        yield client


def test_api_error_rendered_with_status(flask_client):
    response = flask_client.get("/fault")
    assert response.status_code == 500
    assert response.get_json() == {
        "code": "WF-65004",
        "message": "Unable to list workflows.",
        "description": "Server encountered an error while listing workflows.",
    }


def test_unhandled_exception_returns_generic_500(flask_client):
    response = flask_client.get("/crash", headers={"X-Correlation-Id": "abc"})
    assert response.status_code == 500
    body = response.get_json()
    assert body["code"] == "WF-65000"
    assert body["traceId"] == "abc"
    assert "boom" not in body["description"]


def test_unknown_url(flask_client):
    response = flask_client.get("/nowhere")
    assert response.status_code == 404
    assert response.get_json()["code"] == "WF-60011"


def test_method_not_allowed(flask_client):
    response = flask_client.delete("/fault")
    assert response.status_code == 405
    assert response.get_json()["code"] == "WF-60012"


def test_payload_too_large(flask_client):
    response = flask_client.post("/upload", data="x" * 64)
    assert response.status_code == 413
    assert response.get_json()["code"] == "WF-60013"


def test_other_http_errors_pass_through(flask_client):
    response = flask_client.get("/teapot")
    assert response.status_code == 418
