"""
Пользователи: регистрация, вход, бан, смена пароля.
PBKDF2 считается в отдельном потоке (asyncio.to_thread), event loop не блокируется.
"""
import asyncio
import logging
from uuid import uuid4

from notestore.core.errors import Conflict, Forbidden, NotFound, Unauthorized, ValidationError
from notestore.db.store import EntityStore
from notestore.models.entities import Snapshot, User
from notestore.services.auth.passwords import hash_password, is_hashed, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 4


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _validate_credentials(email: str, password: str) -> None:
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


class UserService:
    def __init__(self, store: EntityStore):
        self.store = store

    async def register(
        self,
        email: str,
        password: str,
        name: str = "",
        phone: str = "",
        address: str = "",
        *,
        is_admin: bool = False,
    ) -> User:
        """Новый пользователь. Email уже занят -> Conflict, существующая запись не меняется."""
        email = normalize_email(email)
        _validate_credentials(email, password)
        credential = await asyncio.to_thread(hash_password, password)

        def mutate(snapshot: Snapshot) -> User:
            if snapshot.find_user_by_email(email) is not None:
                raise Conflict("Email already exists. Login instead.")
            user = User(
                id=str(uuid4()),
                email=email,
                password=credential,
                name=name.strip(),
                phone=phone.strip(),
                address=address.strip(),
                is_admin=is_admin,
            )
            snapshot.users.append(user)
            return user.model_copy(deep=True)

        user = await self.store.commit(mutate)
        logger.info("user_registered", extra={"user_id": user.id})
        return user

    async def authenticate(self, email: str, password: str) -> User:
        snapshot = await self.store.load()
        user = snapshot.find_user_by_email(normalize_email(email))
        if user is None:
            raise NotFound("User not found. Please Register.")
        if not await asyncio.to_thread(verify_password, password, user.password):
            raise Unauthorized("Incorrect Password.")
        if user.is_banned:
            raise Forbidden("Account Banned.")
        if not is_hashed(user.password):
            await self._rehash(user.id, password)
        return user

    async def authenticate_admin(self, email: str, password: str) -> User:
        snapshot = await self.store.load()
        user = snapshot.find_user_by_email(normalize_email(email))
        if user is None or not user.is_admin:
            raise Unauthorized("Invalid Credentials")
        if not await asyncio.to_thread(verify_password, password, user.password):
            raise Unauthorized("Invalid Credentials")
        if not is_hashed(user.password):
            await self._rehash(user.id, password)
        return user

    async def _rehash(self, user_id: str, password: str) -> None:
        credential = await asyncio.to_thread(hash_password, password)

        def mutate(snapshot: Snapshot) -> None:
            user = snapshot.find_user(user_id)
            if user is not None and not is_hashed(user.password):
                user.password = credential

        await self.store.commit(mutate)
        logger.info("legacy_password_rehashed", extra={"user_id": user_id})

    async def get(self, user_id: str) -> User | None:
        snapshot = await self.store.load()
        return snapshot.find_user(user_id)

    async def list_users(self) -> list[User]:
        snapshot = await self.store.load()
        return snapshot.users

    async def change_password(self, user_id: str, new_password: str) -> None:
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        credential = await asyncio.to_thread(hash_password, new_password)

        def mutate(snapshot: Snapshot) -> None:
            user = snapshot.find_user(user_id)
            if user is None:
                raise NotFound("User not found")
            user.password = credential

        await self.store.commit(mutate)
        logger.info("password_changed", extra={"user_id": user_id})

    async def toggle_ban(self, user_id: str) -> User:
        """Переключить бан. Администратора забанить нельзя."""

        def mutate(snapshot: Snapshot) -> User:
            user = snapshot.find_user(user_id)
            if user is None:
                raise NotFound("User not found")
            if user.is_admin:
                raise Forbidden("Admins cannot be banned")
            user.is_banned = not user.is_banned
            return user.model_copy(deep=True)

        user = await self.store.commit(mutate)
        logger.info("user_ban_toggled", extra={"user_id": user_id, "state": "banned" if user.is_banned else "active"})
        return user

    async def delete_user(self, user_id: str) -> None:
        def mutate(snapshot: Snapshot) -> None:
            before = len(snapshot.users)
            snapshot.users = [u for u in snapshot.users if u.id != user_id]
            if len(snapshot.users) == before:
                raise NotFound("User not found")

        await self.store.commit(mutate)
        logger.info("user_deleted", extra={"user_id": user_id})

    async def ensure_admin(self, email: str, password: str) -> User | None:
        """Создать администратора, если в хранилище его ещё нет. Для пустой установки."""
        email = normalize_email(email)
        if not email or not password:
            return None
        snapshot = await self.store.load()
        if any(u.is_admin for u in snapshot.users):
            return None
        try:
            user = await self.register(email, password, name="Admin", is_admin=True)
        except Conflict:
            logger.warning("admin_bootstrap_email_taken", extra={"error": email})
            return None
        logger.info("admin_bootstrapped", extra={"user_id": user.id})
        return user
