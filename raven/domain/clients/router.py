"""Client router - lookup endpoints"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import ValidationError
from ...shared.validators import validate_email
from .schemas import ClientExistsResponse, ClientResponse
from .service import ClientDirectory

router = APIRouter(tags=["Clients"])


def get_client_directory(db: Session = Depends(get_db)) -> ClientDirectory:
    """Dependency injection for ClientDirectory"""
    return ClientDirectory(db)


@router.get("/check-client", response_model=ClientExistsResponse)
async def check_client(
    email: str = Query(...),
    directory: ClientDirectory = Depends(get_client_directory),
):
    """Whether a client is registered under this email"""
    if not email.strip():
        raise ValidationError("Email parameter is required.")
    try:
        email = validate_email(email)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return ClientExistsResponse(exists=directory.exists(email))


@router.get("/clients/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: int,
    directory: ClientDirectory = Depends(get_client_directory),
):
    return ClientResponse.from_client(directory.get_client(client_id))
