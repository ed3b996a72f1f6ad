"""
Request bodies accepted by the HTTP layer.

Field names follow the camelCase JSON used by the web client; snake_case
names are accepted too.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LoginRequest(BaseModel):
    email: str = Field(..., description="Account e-mail address")
    password: str = Field(..., description="Account password")


class SourceUploadRequest(BaseModel):
    """A data source uploaded from the terminal. `content` is the raw CSV text."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, description="File name, unique within the session")
    content: str = Field(..., description="Raw tabular text")
    record_count: int = Field(..., ge=0, description="Number of data rows counted by the uploader")


class CommandRequest(BaseModel):
    text: str = Field(..., description="Natural-language command")
