from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SessionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    user_id: str = Field(min_length=1, max_length=128)
    email: str | None = Field(default=None, max_length=320)


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    authenticated: bool
    user_id: str | None = None
    email: str | None = None
    display_name: str | None = None
