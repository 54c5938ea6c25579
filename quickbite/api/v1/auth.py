from fastapi import APIRouter, Depends, status

from quickbite.api.deps import get_auth_service, run_with_deadline
from quickbite.schemas.auth import LoginRequest, RegisterRequest
from quickbite.schemas.response import SuccessResponse
from quickbite.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=SuccessResponse)
async def register_endpoint(payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    """Creates an account and returns a bearer token for it."""
    result = await run_with_deadline(auth.register(payload))
    return SuccessResponse(data=result.model_dump(mode="json"))


@router.post("/login", response_model=SuccessResponse)
async def login_endpoint(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    result = await run_with_deadline(auth.login(payload))
    return SuccessResponse(data=result.model_dump(mode="json"))
