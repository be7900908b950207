"""Register, login, token verification and logout."""

from fastapi import APIRouter, Depends, HTTPException, Request

from econarrative import storage
from econarrative.auth import bearer_token, current_user

from .models import Credentials

router = APIRouter(prefix="/auth")


@router.post("/register", status_code=201)
async def register(body: Credentials):
    """Create a user account and workspace."""
    if not body.username or not body.password:
        raise HTTPException(400, "Missing fields")
    try:
        storage.register_user(body.username, body.password)
    except ValueError as e:
        raise HTTPException(400, str(e))
    except FileExistsError as e:
        raise HTTPException(409, str(e))
    return {"success": True, "username": body.username}


@router.post("/login")
async def login(body: Credentials, request: Request):
    """Exchange credentials for a bearer token."""
    user = storage.authenticate_user(body.username, body.password)
    if user is None:
        raise HTTPException(401, "Invalid credentials")
    token = request.app.state.authenticator.issue(user["username"])
    return {"token": token, "username": user["username"]}


@router.get("/verify")
async def verify(username: str = Depends(current_user)):
    """Check a token and return its username."""
    return {"username": username}


@router.post("/logout")
async def logout(
    request: Request,
    token: str = Depends(bearer_token),
    username: str = Depends(current_user),
):
    """Invalidate the current token."""
    request.app.state.authenticator.revoke(token)
    return {"success": True}
