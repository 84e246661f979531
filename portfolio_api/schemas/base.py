from typing import Optional

from pydantic import BaseModel, ConfigDict, model_serializer
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class APIResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None

    @model_serializer(mode="wrap")
    def omit_empty_message(self, handler):
        # "message" only appears in the envelope when there is one to show
        data = handler(self)
        if self.message is None:
            data.pop("message", None)
        return data
