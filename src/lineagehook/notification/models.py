"""Pydantic models for catalog entities and notification messages."""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter

from lineagehook.global_models import QUALIFIED_NAME


class Entity(BaseModel):
    """A catalog entity: a type name plus a bag of attributes.

    Attribute values may themselves be entities (or lists of entities),
    e.g. a table's storage descriptor and columns.
    """

    type_name: str = Field(..., description="Catalog type name (e.g., hive_table)")
    attributes: Dict[str, Any] = Field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def set(self, name: str, value: Any) -> "Entity":
        self.attributes[name] = value
        return self

    @property
    def qualified_name(self) -> Optional[str]:
        """The entity's unique key within its type and cluster."""
        return self.attributes.get(QUALIFIED_NAME)


class EntityCreateRequest(BaseModel):
    """Create or update a list of entities (upsert semantics)."""

    type: Literal["ENTITY_CREATE"] = "ENTITY_CREATE"
    user: str
    entities: List[Entity] = Field(default_factory=list)


class EntityPartialUpdateRequest(BaseModel):
    """Patch selected attributes of the entity found by a unique attribute."""

    type: Literal["ENTITY_PARTIAL_UPDATE"] = "ENTITY_PARTIAL_UPDATE"
    user: str
    type_name: str
    attribute: str = QUALIFIED_NAME
    attribute_value: str = Field(..., description="Current (pre-update) key value")
    entity: Entity = Field(..., description="Attributes to set")


class EntityDeleteRequest(BaseModel):
    """Delete the entity found by a unique attribute."""

    type: Literal["ENTITY_DELETE"] = "ENTITY_DELETE"
    user: str
    type_name: str
    attribute: str = QUALIFIED_NAME
    attribute_value: str


NotificationMessage = Annotated[
    Union[EntityCreateRequest, EntityPartialUpdateRequest, EntityDeleteRequest],
    Field(discriminator="type"),
]

MessageList = TypeAdapter(List[NotificationMessage])
"""Validates and serializes ordered message lists."""
