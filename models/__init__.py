from .user import User
from .clinic import Clinic, UserClinic
from .provider import Provider, UserProvider
from .drug import DrugDetail
from .program import Program, Enrollment

__all__ = [
    "User",
    "Clinic",
    "UserClinic",
    "Provider",
    "UserProvider",
    "DrugDetail",
    "Program",
    "Enrollment",
]
