from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Repo(CamelModel):
    id: int = 0
    name: str = ""
    full_name: str = ""
    url: str = ""
    description: str = ""
    language: str = ""
    topics: list[str] = Field(default_factory=list)
    readme: str = ""
    pushed_at: str = ""
    stars: int = 0
    forks: int = 0
    pinned: bool = False
    pin_order: int = 0


class RepoOverride(CamelModel):
    description: str = ""
    readme: str = ""
    pinned: bool = False
    pin_order: int = 0


class Certification(CamelModel):
    name: str = ""
    issuer: str = ""
    date: str = ""
    url: str = ""


class Experience(CamelModel):
    role: str = ""
    company: str = ""
    date_range: str = ""
    description: list[str] = Field(default_factory=list)


class SiteData(CamelModel):
    display_name: str = "Your Name"
    headline: str = "Full-Stack Engineer"
    bio: str = "I build secure, production-ready applications."
    cv_url: str = ""
    languages: list[str] = Field(default_factory=lambda: ["Go", "TypeScript", "Python"])
    certifications: list[Certification] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)


class StatusResponse(BaseModel):
    status: str
