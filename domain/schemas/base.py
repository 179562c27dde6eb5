from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request body whose JSON keys are camelCase, as sent by the web client."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """Dump with the camelCase keys used for stored documents."""
        return self.model_dump(by_alias=True, exclude_none=True)
