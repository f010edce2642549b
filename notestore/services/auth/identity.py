"""
Request-scoped identity: resolved once per request from the session token,
then passed explicitly into every operation that needs it.
"""
from pydantic import BaseModel

from notestore.models.entities import Role, User


class RequestIdentity(BaseModel):
    user_id: str
    email: str
    name: str = ""
    role: Role = Role.STANDARD

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "RequestIdentity":
        return cls(user_id=user.id, email=user.email, name=user.name, role=user.role)
