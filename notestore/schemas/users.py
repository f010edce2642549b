from pydantic import BaseModel

from notestore.models.entities import Role, User


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str = ""
    phone: str = ""
    address: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class ChangePasswordRequest(BaseModel):
    new_password: str


class UserOut(BaseModel):
    id: str
    email: str
    name: str
    phone: str
    address: str
    role: Role
    is_banned: bool
    cart: list[int]
    purchased_notes: list[int]

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            phone=user.phone,
            address=user.address,
            role=user.role,
            is_banned=user.is_banned,
            cart=user.cart,
            purchased_notes=user.purchased_notes,
        )


class SessionOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
