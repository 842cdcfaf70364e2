from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class Identity(BaseModel):
    user_id: str = Field(min_length=1)
    email: str | None = None
    display_name: str | None = None

    @model_validator(mode="after")
    def _default_display_name(self) -> "Identity":
        if not self.display_name:
            local_part = (self.email or "").split("@")[0]
            self.display_name = local_part or "User"
        return self
