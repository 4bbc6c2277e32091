"""Admin user-management routes."""

from fastapi import APIRouter, Query, status

from gigslk.api.deps import AdminSession, ApiClient
from gigslk.schemas.admin import AdminUserCreate, AdminUserListResponse
from gigslk.schemas.common import MessageResponse
from gigslk.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/users",
    response_model=AdminUserListResponse,
    summary="List users",
    description="All accounts, optionally filtered by username, email or role.",
)
async def list_users(
    session: AdminSession,
    api: ApiClient,
    q: str = Query(default="", description="Case-insensitive search"),
) -> AdminUserListResponse:
    users = await AdminService(api, session).list_users(q)
    return AdminUserListResponse(users=users, total=len(users))


@router.post(
    "/users",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a user",
)
async def add_user(request: AdminUserCreate, session: AdminSession, api: ApiClient) -> MessageResponse:
    message = await AdminService(api, session).add_user(request)
    return MessageResponse(message=message)


@router.delete("/users/{user_id}", response_model=MessageResponse, summary="Delete a user")
async def delete_user(user_id: int, session: AdminSession, api: ApiClient) -> MessageResponse:
    message = await AdminService(api, session).delete_user(user_id)
    return MessageResponse(message=message)
