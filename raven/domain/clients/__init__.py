from .repository import ClientRepository
from .router import router
from .service import ClientDirectory

__all__ = ["ClientDirectory", "ClientRepository", "router"]
