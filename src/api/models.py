"""Pydantic models for API request/response."""

from typing import Optional
from pydantic import BaseModel, Field

from domain.model.user import Country, UserProfile


class UserResponse(BaseModel):
    """Response model for user. The password hash is never exposed."""
    id: str = Field(..., description="User ID")
    first_name: str
    last_name: str
    nickname: str
    email: str
    country: Country
    created_at: str = Field(..., description="Creation timestamp (RFC 3339)")
    updated_at: str = Field(..., description="Last update timestamp (RFC 3339)")

    @classmethod
    def from_profile(cls, profile: UserProfile) -> 'UserResponse':
        return cls(
            id=profile.id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            nickname=profile.nickname,
            email=profile.email,
            country=profile.country,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )


class CreateUserBody(BaseModel):
    """Request model for user creation."""
    first_name: str
    last_name: str
    nickname: str
    email: str
    password: str
    country: Country = Field(Country.UNKNOWN, description="Country code; UNKNOWN is rejected")


class CreateUserResponse(BaseModel):
    user: UserResponse


class UpdateUserBody(BaseModel):
    """Request model for partial user update. Omitted or null fields are left untouched."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    nickname: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    country: Optional[Country] = None


class GetUsersResponse(BaseModel):
    """Response model for a page of users."""
    results: list[UserResponse]
    page: int
    page_size: int
    total_count: int = Field(..., description="Number of users in this page")


class StatusResponse(BaseModel):
    status: str
    message: str
