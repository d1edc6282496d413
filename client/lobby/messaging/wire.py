"""Base model for payloads that cross the session channel."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Frozen model with snake_case attributes and camelCase wire keys.

    Construct with either spelling; dump with ``by_alias=True`` before
    sending. Unknown keys from the server are ignored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
