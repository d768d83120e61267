from datetime import UTC, datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base document entity.

    Field names are snake_case in Python and in storage; the public JSON
    representation uses camelCase aliases.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str | None = PydanticField(default=None, description="Document key")

    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)

    def to_document(self) -> dict[str, Any]:
        """Serialize to the flat field map persisted in the document store."""
        return self.model_dump(mode="json", exclude={"id"})

    @classmethod
    def from_document(cls, record: dict[str, Any]) -> Self:
        return cls.model_validate(record)

    def touch(self) -> None:
        self.updated_at = utcnow()
