"""Configuration for the budget charts service.

AppConfig is loaded from environment variables with working defaults.
"""

import os as _os


def _positive_int(name: str, default: str) -> int:
    value = int(_os.getenv(name, default))
    if value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value}")
    return value


class AppConfig:
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box against a local budget server.

    Environment variables:
        BUDGET_ENDPOINT: Upstream JSON endpoint (default: http://localhost:3000/budget)
        BUDGET_TIMEOUT: Base request timeout in seconds (default: 30)
        APP_PORT: API server port (default: 8000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        CHART_WIDTH / CHART_HEIGHT: Default donut viewport in px (default: 600 x 400)
        RENDER_MAX_ATTEMPTS: Deferred draw attempts before giving up (default: 5)
    """

    def __init__(self) -> None:
        self.budget_endpoint = _os.getenv("BUDGET_ENDPOINT", "http://localhost:3000/budget")
        self.budget_timeout = float(_os.getenv("BUDGET_TIMEOUT", "30"))
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.chart_width = _positive_int("CHART_WIDTH", "600")
        self.chart_height = _positive_int("CHART_HEIGHT", "400")
        self.render_max_attempts = _positive_int("RENDER_MAX_ATTEMPTS", "5")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
