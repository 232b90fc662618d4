"""User settings record."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Settings(BaseModel):
    """Open settings record; keys not declared here are kept as-is."""

    model_config = ConfigDict(extra="allow", alias_generator=to_camel, populate_by_name=True)

    whitelisted_apps: list[str] = Field(
        default_factory=list, description="Process paths shown in the application mixer"
    )
