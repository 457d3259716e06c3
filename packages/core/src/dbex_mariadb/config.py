"""Configuration for dbex-mariadb."""

from pathlib import Path

import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from dbex_mariadb_models import ConnectionFields


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DBEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # Driver / pool
    # ==========================================================================

    driver: str = Field(
        default="mysql+pymysql",
        description="SQLAlchemy driver name used to build connection URLs",
    )
    pool_size: int = Field(default=5, description="Connections kept open per session")
    max_overflow: int = Field(default=10, description="Extra connections allowed under load")
    pool_pre_ping: bool = Field(
        default=True, description="Check connections for liveness before handing them out"
    )
    pool_recycle: int = Field(
        default=300, description="Seconds after which pooled connections are replaced"
    )
    connect_timeout: int = Field(
        default=10, description="Driver connect timeout in seconds (not a query timeout)"
    )

    # ==========================================================================
    # Catalog
    # ==========================================================================

    preview_limit: int = Field(
        default=100, description="Row bound for table and view previews"
    )

    # ==========================================================================
    # CLI
    # ==========================================================================

    connections_file: str = Field(
        default=str(Path.home() / ".dbex" / "connections.yaml"),
        description="YAML file with named connection fields",
    )
    log_level: str = Field(default="INFO", description="Logging level for the CLI")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset cached settings (useful for testing)."""
    global _settings
    _settings = None


def load_connections(path: Path | str) -> dict[str, ConnectionFields]:
    """Load named connection fields from a YAML file.

    The file maps connection names to field sets::

        local:
          host: 127.0.0.1
          port: "3306"
          user: root
          password: secret
          database: sales

    Returns an empty dict when the file does not exist.

    Raises:
        ValueError: If the file is not a mapping or an entry is malformed
    """
    path = Path(path)
    if not path.exists():
        return {}

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Connections file {path} must contain a mapping")

    connections = {}
    for name, entry in data.items():
        if not isinstance(entry, dict):
            raise ValueError(f"Connection '{name}' in {path} must be a mapping")
        try:
            connections[str(name)] = ConnectionFields(
                **{k: "" if v is None else str(v) for k, v in entry.items()}
            )
        except ValidationError as e:
            raise ValueError(f"Invalid connection '{name}' in {path}: {e}") from e
    return connections
