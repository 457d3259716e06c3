"""Navigation tree models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(str, Enum):
    """What a tree node represents."""

    SCHEMA = "schema"
    FOLDER = "folder"
    TABLE = "table"
    VIEW = "view"
    ROUTINE = "routine"
    TRIGGER = "trigger"
    EVENT = "event"
    COLUMN = "column"


class ColumnKey(str, Enum):
    """Key classification of a column node. Fixed at creation."""

    PRIMARY = "primary"
    FOREIGN = "foreign"
    PLAIN = "plain"


class NodeAction(BaseModel):
    """An action offered on a node (e.g. show structure)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Action identifier sent back on click")
    icon: str = Field(..., description="Icon class")
    description: str = Field(default="", description="Tooltip text")


class TreeNode(BaseModel):
    """A node of the metadata tree.

    ``datasets`` is opaque to the host and echoed back verbatim on the
    next interaction with the node.
    """

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Text shown in the tree")
    name: str = Field(..., description="Name unique among siblings")
    kind: NodeKind = Field(..., description="Entity kind")
    icon: str = Field(..., description="Icon class")
    details: str | None = Field(default=None, description="Detail shown beside the label")
    collapsed: bool = Field(default=True, description="Render collapsed")
    datasets: dict[str, Any] = Field(default_factory=dict, description="Echoed context")
    actions: list[NodeAction] | None = Field(default=None, description="Available actions")
    children: list["TreeNode"] | None = Field(default=None, description="Child nodes")
    column_key: ColumnKey | None = Field(
        default=None, description="Key classification (column nodes only)"
    )

    def to_dict(self) -> dict[str, Any]:
        """External shape expected by the host tree view."""
        return self.model_dump(mode="json", exclude_none=True, exclude={"kind", "column_key"})
