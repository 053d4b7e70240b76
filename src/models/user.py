"""
User Pydantic models
"""

from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """User as exchanged over the wire; userId is optional on creation"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[UUID] = Field(default=None, alias="userId")
    username: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")

    def to_json(self) -> dict:
        """Serialize with camelCase keys, keeping a null userId"""
        return self.model_dump(by_alias=True, mode="json")


class UserResponse(BaseModel):
    """User representation returned by the API.

    Name fields are nullable so that a permissive DELETE of an unknown
    identifier can still answer with the full field set.
    """
    model_config = ConfigDict(populate_by_name=True)

    user_id: UUID = Field(alias="userId")
    username: Optional[str]
    first_name: Optional[str] = Field(alias="firstName")
    last_name: Optional[str] = Field(alias="lastName")
