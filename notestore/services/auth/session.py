"""
User session tokens with signed serialization.
Uses itsdangerous for tamper-proof, expiring tokens that carry only the user id.
"""
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from notestore.core.config import settings


class SessionTokens:
    def __init__(self, secret: str | None = None, max_age: int | None = None) -> None:
        self.serializer = URLSafeTimedSerializer(
            secret or settings.session_secret,
            salt="user-session",
        )
        self.max_age = max_age or settings.session_ttl

    def issue(self, user_id: str) -> str:
        return self.serializer.dumps({"uid": user_id})

    def resolve(self, token: str | None) -> str | None:
        """User id from a token. None if missing, tampered with or expired."""
        if not token:
            return None
        try:
            data = self.serializer.loads(token, max_age=self.max_age)
        except (BadSignature, SignatureExpired):
            return None
        if not isinstance(data, dict):
            return None
        uid = data.get("uid")
        return uid if isinstance(uid, str) else None

