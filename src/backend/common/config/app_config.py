"""Application configuration.

Values come from the process environment. `.env` is loaded first; for local
runs, non-blank values from `.env.example` fill in whatever is still unset.
"""

from __future__ import annotations

import os

from dotenv import dotenv_values, load_dotenv

load_dotenv(override=False)

# `.env.example` contains blank placeholders for secrets; never let those
# blanks override real values.
if not os.environ.get("INTEGRATION_APP_WORKSPACE_KEY"):
    example_path = os.path.abspath(".env.example")
    if os.path.exists(example_path):
        for k, v in (dotenv_values(example_path) or {}).items():
            if not k or v is None or v == "":
                continue
            if not os.environ.get(k):
                os.environ[k] = v


class AppConfig:
    """Snapshot of the environment-driven settings used by the backend."""

    def __init__(self):
        self.MONGODB_URI = self._get_optional("MONGODB_URI", "mongodb://localhost:27017")
        self.MONGODB_DATABASE = self._get_optional("MONGODB_DATABASE", "records_sync")
        self.MONGODB_RECORDS_COLLECTION = self._get_optional(
            "MONGODB_RECORDS_COLLECTION", "records"
        )

        self.INTEGRATION_APP_API_URI = self._get_optional(
            "INTEGRATION_APP_API_URI", "https://api.integration.app"
        )
        self.INTEGRATION_APP_WORKSPACE_KEY = self._get_optional("INTEGRATION_APP_WORKSPACE_KEY")
        self.INTEGRATION_APP_WORKSPACE_SECRET = self._get_optional(
            "INTEGRATION_APP_WORKSPACE_SECRET"
        )
        self.INTEGRATION_APP_TOKEN_TTL_SECONDS = int(
            self._get_optional("INTEGRATION_APP_TOKEN_TTL_SECONDS", "7200")
        )
        self.INTEGRATION_APP_HTTP_TIMEOUT_SECONDS = float(
            self._get_optional("INTEGRATION_APP_HTTP_TIMEOUT_SECONDS", "30")
        )

        self.BASIC_LOGGING_LEVEL = self._get_optional("BASIC_LOGGING_LEVEL", "INFO")
        self.PACKAGE_LOGGING_LEVEL = self._get_optional("PACKAGE_LOGGING_LEVEL", "WARNING")
        self.LOGGING_PACKAGES = self._get_optional("LOGGING_PACKAGES", "pymongo,urllib3")

        self.FRONTEND_SITE_NAME = self._get_optional("FRONTEND_SITE_NAME", "http://127.0.0.1:3000")

    @staticmethod
    def _get_optional(name: str, default: str = "") -> str:
        return os.environ.get(name, default)

    def integration_app_credentials(self) -> tuple[str, str]:
        """Return (workspace_key, workspace_secret) or raise if either is missing."""
        key = self.INTEGRATION_APP_WORKSPACE_KEY
        secret = self.INTEGRATION_APP_WORKSPACE_SECRET
        if not key or not secret:
            raise ValueError(
                "Missing INTEGRATION_APP_WORKSPACE_KEY or INTEGRATION_APP_WORKSPACE_SECRET"
            )
        return key, secret


config = AppConfig()
