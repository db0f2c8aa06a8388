"""Shared pydantic configuration.

Learn: JSON on the wire is camelCase (userId, dueDate, createdAt); Python code
uses snake_case. Requests accept either spelling.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, model_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class RequestModel(ApiModel):
    model_config = {**ApiModel.model_config, "str_strip_whitespace": True}


class PartialUpdate(RequestModel):
    """Base for PUT/PATCH bodies: every field optional, only sent fields apply.

    Fields listed in `required_when_sent` may be omitted but not sent as null.
    """

    required_when_sent: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def _reject_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for name in cls.required_when_sent:
                alias = to_camel(name)
                for key in (name, alias):
                    if key in data and data[key] is None:
                        raise ValueError(f"{alias} cannot be null")
        return data

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, keyed by column name."""
        return self.model_dump(exclude_unset=True)
