"""Connection field models."""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import URL

FIELD_NAMES = ("host", "port", "user", "password", "database")


class ConnectionFields(BaseModel):
    """Credentials for one session, as entered on the connection form.

    All values are plain strings; ``database`` may be empty.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="", description="Hostname or IP address without port")
    port: str = Field(default="", description="Server port, digits only")
    user: str = Field(default="", description="Login user")
    password: str = Field(default="", description="Login password")
    database: str = Field(default="", description="Default database (optional)")

    def is_complete(self) -> bool:
        """Host, port and user are all filled in."""
        return bool(self.host and self.port and self.user)

    def url(self, driver: str = "mysql+pymysql") -> URL:
        """Build the SQLAlchemy URL for these fields."""
        return URL.create(
            driver,
            username=self.user or None,
            password=self.password or None,
            host=self.host or None,
            port=int(self.port) if self.port else None,
            database=self.database or None,
        )

    @classmethod
    def from_datasets(cls, datasets: Mapping[str, Any]) -> "ConnectionFields":
        """Pick connection fields out of an opaque node context."""
        values = {}
        for name in FIELD_NAMES:
            value = datasets.get(name)
            if value is not None:
                values[name] = str(value)
        return cls(**values)
