"""Normalized query result models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ColumnType(str, Enum):
    """Semantic column type shown by the result grid."""

    NUMBER = "number"
    TEXT = "text"
    DATE = "date"
    BOOLEAN = "boolean"
    BINARY = "binary"
    UNKNOWN = "unknown"


class ResultColumn(BaseModel):
    """A named, typed result column."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: ColumnType = ColumnType.UNKNOWN


class ResultSet(BaseModel):
    """Outcome of a query or introspection.

    Exactly one payload shape is populated:

    - tabular: ``columns`` + ``data`` (``query`` optional)
    - mutation: ``records_affected``
    - structure: ``query`` holding DDL / definition text
    """

    # binary cells (BLOB, BIT, GEOMETRY) are base64 text in JSON mode
    model_config = ConfigDict(frozen=True, populate_by_name=True, ser_json_bytes="base64")

    columns: list[ResultColumn] | None = None
    data: list[list[Any]] | None = None
    records_affected: int | None = Field(default=None, alias="recordsAffected")
    query: str | None = None

    @model_validator(mode="after")
    def check_shape(self) -> "ResultSet":
        tabular = self.columns is not None or self.data is not None
        if tabular:
            if self.columns is None or self.data is None:
                raise ValueError("columns and data must be given together")
            if self.records_affected is not None:
                raise ValueError("tabular result cannot carry recordsAffected")
            width = len(self.columns)
            for index, row in enumerate(self.data):
                if len(row) != width:
                    raise ValueError(
                        f"row {index} has {len(row)} values, expected {width}"
                    )
        elif self.records_affected is not None:
            if self.query is not None:
                raise ValueError("mutation result cannot carry query text")
        elif self.query is None:
            raise ValueError("result set has no payload")
        return self

    @property
    def is_tabular(self) -> bool:
        return self.columns is not None

    @property
    def is_mutation(self) -> bool:
        return self.records_affected is not None

    @property
    def is_structure(self) -> bool:
        return not self.is_tabular and not self.is_mutation

    @classmethod
    def tabular(
        cls, columns: list[ResultColumn], data: list[list[Any]], query: str | None = None
    ) -> "ResultSet":
        return cls(columns=columns, data=data, query=query)

    @classmethod
    def affected(cls, count: int) -> "ResultSet":
        return cls(records_affected=count)

    @classmethod
    def structure(cls, text: str) -> "ResultSet":
        return cls(query=text)

    def to_dict(self) -> dict[str, Any]:
        """External shape expected by the host result grid."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
