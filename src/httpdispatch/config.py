from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Field names map to env vars case-insensitively (``METRICS_PATH=/stats``).
    A ``.env`` file is read when present.
    """

    app_name: str = "httpdispatch"

    # Prometheus counter is exported as <namespace>_<error_counter_name>_total
    metrics_namespace: str = "httpdispatch"
    error_counter_name: str = "error_types"
    metrics_path: str = "/metrics"

    # Root directory for Template payloads
    template_directory: str = "./static"

    health_path: str = "/.well-known/health"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
