from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.user import LoginRequest, LoginOut
from app.services import auth_service
from app.services.auth_service import CredentialVerifier

router = APIRouter(tags=["auth"])


def get_credential_verifier(request: Request) -> CredentialVerifier:
    return request.app.state.verifier


@router.post("/login", response_model=LoginOut)
async def login(
    login_request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    verifier: CredentialVerifier = Depends(get_credential_verifier)
):
    """Check credentials and the selected language"""
    return await auth_service.authenticate(
        db,
        login_request.username,
        login_request.password,
        login_request.selected_language,
        verifier
    )
