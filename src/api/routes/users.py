"""User CRUD routes.

- POST /users: Create user
- GET /users: List users (page, page_size, optional filter_country)
- PATCH /users/{user_id}: Partial update
- DELETE /users/{user_id}: Hard delete
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_user_service
from api.models import (
    CreateUserBody,
    CreateUserResponse,
    GetUsersResponse,
    UpdateUserBody,
    UserResponse,
)
from domain.model.errors import InternalError, NotFoundError, ValidationError
from domain.model.user import (
    Country,
    CreateUserRequest,
    DeleteUserRequest,
    GetUsersRequest,
    UpdateUserRequest,
)
from services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=CreateUserResponse, status_code=status.HTTP_201_CREATED)
def create_user(body: CreateUserBody, service: UserService = Depends(get_user_service)):
    """Create a new user.

    Raises:
        HTTPException: 400 if the country is not valid, 500 if storage fails
    """
    try:
        profile = service.create_user(CreateUserRequest(
            first_name=body.first_name,
            last_name=body.last_name,
            nickname=body.nickname,
            email=body.email,
            password=body.password,
            country=body.country,
        ))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return CreateUserResponse(user=UserResponse.from_profile(profile))


@router.get("", response_model=GetUsersResponse)
def get_users(
    page: int = Query(default=0, description="Zero-based offset of the first user"),
    page_size: int = Query(default=10, description="Users per page"),
    filter_country: Optional[Country] = Query(default=None, description="Only users from this country"),
    service: UserService = Depends(get_user_service),
):
    """List users one page at a time."""
    try:
        result = service.get_users(GetUsersRequest(
            page=page,
            page_size=page_size,
            filter_country=filter_country,
        ))
    except InternalError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return GetUsersResponse(
        results=[UserResponse.from_profile(p) for p in result.results],
        page=result.page,
        page_size=result.page_size,
        total_count=result.total_count,
    )


@router.patch("/{user_id}")
def update_user(
    user_id: str,
    body: UpdateUserBody,
    service: UserService = Depends(get_user_service),
):
    """Update only the fields present in the body."""
    try:
        service.update_user(UpdateUserRequest(
            id=user_id,
            first_name=body.first_name,
            last_name=body.last_name,
            nickname=body.nickname,
            email=body.email,
            password=body.password,
            country=body.country,
        ))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return {}


@router.delete("/{user_id}")
def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    try:
        service.delete_user(DeleteUserRequest(id=user_id))
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {}
