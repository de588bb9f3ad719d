"""Client repository - Database operations for clients"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import ConflictError
from ...models import Client

logger = logging.getLogger(__name__)


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_client_by_id(db: Session, client_id: int) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id).first()

    @staticmethod
    def get_client_by_email(db: Session, email: str) -> Optional[Client]:
        """Exact (case-sensitive) email match"""
        return db.query(Client).filter(Client.email == email).first()

    @staticmethod
    def create_client(db: Session, **kwargs) -> Client:
        """Insert a client; the email and referral code unique indexes are the real guard"""
        client = Client(**kwargs)
        db.add(client)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"⚠️ Client insert rejected by unique constraint: {kwargs.get('email')}")
            raise ConflictError(
                "A client with this email already exists. Please try again."
            ) from e
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **kwargs) -> Client:
        for key, value in kwargs.items():
            setattr(client, key, value)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Client update conflicts with an existing client.") from e
        db.refresh(client)
        return client
