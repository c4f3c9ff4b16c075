from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Skill(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: float
