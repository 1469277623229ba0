"""Gateway configuration."""

from moviegraph.shared.config import BaseAppSettings


class GatewaySettings(BaseAppSettings):
    """Settings specific to the FastAPI Gateway."""

    app_name: str = "gateway"
    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: list[str] = ["*"]
    ensure_schema: bool = True
