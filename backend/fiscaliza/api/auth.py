from fastapi import APIRouter, Depends, HTTPException

from ..auth import create_access_token, get_current_user
from ..deps import get_user_service
from ..schemas import AuthOut, LoginIn, UserAccount
from ..services.user_service import UserService

router = APIRouter()


@router.post("/login", response_model=AuthOut)
async def login(request: LoginIn, users: UserService = Depends(get_user_service)):
    """Exchange username/password for a bearer token."""
    user = await users.login(request.username, request.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Usuário ou senha inválidos.")
    return AuthOut(access_token=create_access_token(user), user=user)


@router.get("/me", response_model=UserAccount)
async def me(current_user: UserAccount = Depends(get_current_user)):
    return current_user
