from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel

GadgetStatus = Literal["Available", "Deployed", "Destroyed", "Decommissioned"]


class GadgetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    status: GadgetStatus
    decommissioned_at: Optional[str] = None
    created_at: str
    updated_at: str


class GadgetWithProbability(GadgetOut):
    success_probability: str = Field(json_schema_extra={"example": "87%"})
    display: str = Field(json_schema_extra={"example": "The Nightingale - 87% success probability"})


class GadgetUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    status: Optional[GadgetStatus] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class ConfirmationCodeOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    confirmation_code: str
    message: str = "Confirmation code generated. Use this code to confirm self-destruct."


class SelfDestructRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Numbers pass validation but never match a pending code.
    confirmation_code: Union[StrictStr, StrictInt] = Field(json_schema_extra={"example": "12345"})
