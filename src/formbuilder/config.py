from __future__ import annotations

import os
from pathlib import Path

FIELD_TYPES = {"text", "textarea", "dropdown", "checkbox", "radio", "date", "file"}
OPTION_TYPES = {"dropdown", "checkbox", "radio"}


class Settings:
    def __init__(self) -> None:
        self.storage_backend = os.getenv("STORAGE_BACKEND", "sqlite").lower()
        self.sqlite_path = Path(os.getenv("SQLITE_PATH", "./data/app.db"))
        self.json_path = Path(os.getenv("JSON_PATH", "./data/jsonstore.json"))
        # "header" trusts X-User-Id as sent; only run it behind a gateway that
        # strips that header from client requests.
        self.auth_mode = os.getenv("AUTH_MODE", "jwt").lower()
        self.jwt_secret = os.getenv("JWT_SECRET", "")
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.frontend_url = os.getenv("FRONTEND_URL", "http://localhost:3000")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.host = os.getenv("HOST", "0.0.0.0")
        port_value = os.getenv("PORT", "5000")
        try:
            self.port = int(port_value)
        except ValueError:
            self.port = 5000


def ensure_dirs(settings: Settings) -> None:
    if settings.storage_backend == "json":
        settings.json_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        settings.sqlite_path.parent.mkdir(parents=True, exist_ok=True)
