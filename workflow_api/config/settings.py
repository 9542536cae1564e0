"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

BACKEND_MEMORY = "memory"
BACKEND_REMOTE = "remote"
SUPPORTED_BACKENDS = (BACKEND_MEMORY, BACKEND_REMOTE)

# WSO2-style super tenant id
SUPER_TENANT_ID = -1234


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as exc:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, exc)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


@dataclass
class AppConfig:
    """Application configuration container."""
    # Backend
    backend: str = BACKEND_MEMORY
    backend_url: str = ""
    backend_token: str = ""
    backend_timeout: float = 5.0

    # API
    api_token: str = ""
    default_tenant_id: int = SUPER_TENANT_ID
    max_content_length: int = 65536  # 64 KB

    # Logging
    log_level: str = "INFO"

    # Docs
    openapi_spec_path: str = ""

    @property
    def api_token_enabled(self) -> bool:
        return bool(self.api_token)


def _int_env(var_name: str, default: int) -> int:
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {var_name} must be an integer, got '{raw}'.")


def _float_env(var_name: str, default: float) -> float:
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {var_name} must be a number, got '{raw}'.")


def load_settings() -> AppConfig:
    """Load application settings from environment and /run/secrets.

    Raises:
        RuntimeError: On unsupported backend, missing remote URL or malformed numbers
    """
    backend = os.environ.get("WORKFLOW_BACKEND", BACKEND_MEMORY).strip().lower()
    if backend not in SUPPORTED_BACKENDS:
        raise RuntimeError(
            f"WORKFLOW_BACKEND must be one of {', '.join(SUPPORTED_BACKENDS)}, got '{backend}'."
        )

    backend_url = os.environ.get("WORKFLOW_BACKEND_URL", "").strip()
    if backend == BACKEND_REMOTE and not backend_url:
        raise RuntimeError("WORKFLOW_BACKEND_URL is required when WORKFLOW_BACKEND=remote.")

    backend_token = _load_secret_from_file("workflow_backend_token", "WORKFLOW_BACKEND_TOKEN") or ""
    api_token = _load_secret_from_file("workflow_api_token", "WORKFLOW_API_TOKEN") or ""

    cfg = AppConfig(
        backend=backend,
        backend_url=backend_url,
        backend_token=backend_token,
        backend_timeout=_float_env("WORKFLOW_BACKEND_TIMEOUT", 5.0),
        api_token=api_token,
        default_tenant_id=_int_env("DEFAULT_TENANT_ID", SUPER_TENANT_ID),
        max_content_length=_int_env("MAX_CONTENT_LENGTH", 65536),
        log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        openapi_spec_path=os.environ.get("OPENAPI_SPEC_PATH", ""),
    )

    logger.info(
        "Settings loaded: backend=%s; default_tenant=%s; api_token=%s",
        cfg.backend,
        cfg.default_tenant_id,
        "enabled" if cfg.api_token_enabled else "disabled",
    )
    return cfg
