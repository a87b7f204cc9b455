from .database import get_db_context, engine, SessionLocal, Base
from .errors import IntakeError, ValidationError, ConflictError, NotFoundError, RemoteError

# Streamlit-bound helpers (core.helpers, core.session_manager) are imported
# directly by pages so the services stay importable without a UI.

__all__ = [
    "get_db_context",
    "engine",
    "SessionLocal",
    "Base",
    "IntakeError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "RemoteError",
]
