"""Gunicorn configuration for the workflow management API.

Run with:
    gunicorn -c gunicorn.conf.py workflow_api.flask_app:app

Secrets (post_fork hook):
1. /run/secrets (Docker secrets) → copied into the worker environment
2. Environment variables already set win over secret files
"""
import os
from pathlib import Path

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
accesslog = "-"
errorlog = "-"

SECRETS_DIR = "/run/secrets"

# Map secret file names to environment variables
SECRET_MAPPING = {
    "workflow_backend_token": "WORKFLOW_BACKEND_TOKEN",
    "workflow_api_token": "WORKFLOW_API_TOKEN",
}


def post_fork(server, worker):
    """
    Called just after a worker has been forked.

    Copies Docker secrets into the environment so load_settings() sees them
    in every worker.
    """
    secrets_dir = Path(SECRETS_DIR)
    if not secrets_dir.is_dir():
        worker.log.info("No %s directory, using environment only", SECRETS_DIR)
        return

    for secret_name, env_name in SECRET_MAPPING.items():
        if os.environ.get(env_name):  # Skip if already set
            continue
        secret_file = secrets_dir / secret_name
        if not secret_file.is_file():
            continue
        try:
            value = secret_file.read_text().strip()
        except OSError as exc:
            worker.log.error(f"Failed to read secret '{secret_name}': {exc}")
            continue
        if value:
            os.environ[env_name] = value
            worker.log.info(f"Loaded secret '{secret_name}' into {env_name}")
