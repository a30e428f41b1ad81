"""
Auth endpoints - registration, login and account maintenance.
"""

from fastapi import APIRouter

from inventory_api.core.dependencies import ClientInfo, CurrentUser, Dispatcher
from inventory_api.core.responses import created_response, success_response
from inventory_api.db.session import DbSession
from inventory_api.schemas.user import LoginRequest, PasswordUpdate, UserCreate, UserResponse, UserUpdate
from inventory_api.services.user_service import UserService

router = APIRouter()


def _token_payload(user, token: str) -> dict:
    return {
        "user": UserResponse.model_validate(user),
        "access_token": token,
        "token_type": "bearer",
    }


@router.post("/register", status_code=201)
async def register(session: DbSession, dispatcher: Dispatcher, client: ClientInfo, data: UserCreate):
    """Create new user and return a token. Password is never echoed."""
    user, token = await UserService(session, dispatcher, client).register(data)
    return created_response("User registered successfully", _token_payload(user, token))


@router.post("/login")
async def login(session: DbSession, dispatcher: Dispatcher, client: ClientInfo, data: LoginRequest):
    user, token = await UserService(session, dispatcher, client).login(data.email, data.password)
    return success_response("Login successful", _token_payload(user, token))


@router.post("/logout")
async def logout(session: DbSession, dispatcher: Dispatcher, client: ClientInfo, user: CurrentUser):
    await UserService(session, dispatcher, client).logout(user)
    return success_response("Logged out successfully")


@router.get("/me")
async def me(user: CurrentUser):
    return success_response("User retrieved successfully", {"user": UserResponse.model_validate(user)})


@router.put("/me")
async def update_me(session: DbSession, dispatcher: Dispatcher, user: CurrentUser, data: UserUpdate):
    user = await UserService(session, dispatcher).update_profile(user, data.name)
    return success_response("Profile updated successfully", {"user": UserResponse.model_validate(user)})


@router.put("/password")
async def update_password(
    session: DbSession, dispatcher: Dispatcher, client: ClientInfo, user: CurrentUser, data: PasswordUpdate
):
    token = await UserService(session, dispatcher, client).update_password(user, data)
    return success_response("Password updated successfully", {"access_token": token, "token_type": "bearer"})
