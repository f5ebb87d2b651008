from inkflow.domains.identity.entities import User
from inkflow.domains.identity.schemas import UserLogin, UserResponse, LoginResponse
from inkflow.domains.identity.services import IdentityService

__all__ = [
    "User",
    "UserLogin", "UserResponse", "LoginResponse",
    "IdentityService"
]
