from .router import admin_router, router
from .schemas import Action, RequestKind
from .service import ApprovalWorkflow

__all__ = ["Action", "ApprovalWorkflow", "RequestKind", "admin_router", "router"]
