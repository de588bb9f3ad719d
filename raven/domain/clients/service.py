"""Client directory - resolves clients by email and creates them on demand"""

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from ...errors import NotFoundError, ValidationError
from ...models import Client
from ...security_utils import generate_referral_code, hash_password
from ...shared.validators import validate_email
from ...utils.sanitization import sanitize_string
from .repository import ClientRepository
from .roles import DEFAULT_ROLE, merge_stored_role, serialize_roles

logger = logging.getLogger(__name__)


class ClientDirectory:
    """Service layer for client lookup and creation"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()

    def get_client(self, client_id: int) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id)
        if not client:
            raise NotFoundError("Client not found.")
        return client

    def find_by_email(self, email: str) -> Optional[Client]:
        return self.repo.get_client_by_email(self.db, email)

    def exists(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def resolve_or_create(
        self, name: str, email: str, password: Optional[str] = None
    ) -> Client:
        """
        Return the client registered under ``email``, creating it if absent.

        An existing record is returned unchanged (name and password are not
        touched). The lookup and insert are not atomic; a concurrent insert
        of the same email surfaces as ConflictError from the repository.
        """
        email = self._clean_email(email)
        client = self.find_by_email(email)
        if client:
            return client
        return self.create_client(name, email, password)

    def create_client(
        self,
        name: str,
        email: str,
        password: Optional[str] = None,
        roles: Optional[Iterable[str]] = None,
        **profile_fields,
    ) -> Client:
        """Insert a new client with a fresh referral code; password is hashed if given"""
        email = self._clean_email(email)
        if not name or not name.strip():
            raise ValidationError("Client name is required.")

        role = serialize_roles(roles) if roles else DEFAULT_ROLE
        client = self.repo.create_client(
            self.db,
            name=sanitize_string(name),
            email=email,
            password=hash_password(password) if password else None,
            role=role,
            referral_code=generate_referral_code(),
            **profile_fields,
        )
        logger.info(f"✅ Created client {client.id} ({role}) for {email}")
        return client

    def add_role(self, client: Client, role: str, **profile_fields) -> Client:
        """Merge ``role`` into the client's role set and apply any extra column updates"""
        merged = merge_stored_role(client.role, role)
        if merged != client.role:
            logger.info(f"👤 Client {client.id} roles: {client.role} -> {merged}")
        return self.repo.update_client(self.db, client, role=merged, **profile_fields)

    def update_profile(self, client: Client, **fields) -> Client:
        return self.repo.update_client(self.db, client, **fields)

    @staticmethod
    def _clean_email(email: Optional[str]) -> str:
        if not email:
            raise ValidationError("Email is required.")
        try:
            return validate_email(email)
        except ValueError as e:
            raise ValidationError(str(e)) from e
