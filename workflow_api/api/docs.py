"""API reference endpoints.

    GET /openapi.json  - the workflow API description, as JSON
    GET /docs          - ReDoc page rendering that description

The YAML document is parsed once per path and cached on the app. Its
``servers`` entry always reflects the base path the resource blueprints are
mounted under.
"""
from __future__ import annotations
import copy
import logging
from html import escape
from pathlib import Path
from typing import Any

import yaml
from flask import Blueprint, Response, current_app, jsonify, url_for

bp = Blueprint("docs", __name__)

REDOC_SCRIPT_URL = "https://cdn.redoc.ly/redoc/latest/bundles/redoc.standalone.js"
DEFAULT_TITLE = "Workflow Management API"
_CACHE_KEY = "workflow_openapi"

logger = logging.getLogger(__name__)

_REDOC_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8"/>
    <title>{title}</title>
    <meta name="robots" content="noindex,nofollow"/>
    <meta name="referrer" content="no-referrer"/>
    <style>body {{ margin: 0; }}</style>
  </head>
  <body>
    <redoc spec-url="{spec_url}" hide-download-button></redoc>
    <script src="{script_url}"></script>
  </body>
</html>"""


def openapi_document_for_app() -> dict[str, Any]:
    """Return the OpenAPI document for the current app.

    Raises:
        FileNotFoundError: If the configured YAML file does not exist
    """
    path = Path(current_app.config["OPENAPI_SPEC_PATH"])
    cache = current_app.extensions.setdefault(_CACHE_KEY, {})
    if path not in cache:
        if not path.is_file():
            raise FileNotFoundError(f"OpenAPI document not found: {path}")
        with path.open("r", encoding="utf-8") as handle:
            document = yaml.safe_load(handle) or {}
        base_path = current_app.config.get("API_BASE_PATH")
        if base_path:
            document["servers"] = [{"url": base_path}]
        cache[path] = document
        logger.debug("Loaded OpenAPI document from %s", path)
    return copy.deepcopy(cache[path])


@bp.route("/openapi.json", methods=["GET"])
def openapi_document() -> Response:
    return jsonify(openapi_document_for_app())


@bp.route("/docs", methods=["GET"])
def api_docs() -> Response:
    title = openapi_document_for_app().get("info", {}).get("title") or DEFAULT_TITLE
    page = _REDOC_PAGE.format(
        title=escape(f"{title} Reference"),
        spec_url=url_for("docs.openapi_document"),
        script_url=REDOC_SCRIPT_URL,
    )
    return Response(page, status=200, mimetype="text/html")
