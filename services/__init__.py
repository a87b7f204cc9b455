from .user_service import ensure_default_users, authenticate_user

# Import the other service modules directly where needed.

__all__ = ["ensure_default_users", "authenticate_user"]
