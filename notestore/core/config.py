"""
Application configuration.
All settings are loaded from environment variables.
Use env.example as a reference for required variables.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    IMPORTANT: session_secret has no default - it MUST be set in .env file.
    """

    # ===========================================
    # APPLICATION
    # ===========================================
    app_env: str = "local"
    public_base_url: str = "http://localhost:8000"
    # CORS: через запятую (например http://localhost:3000). Пусто = дефолтный список в коде.
    cors_origins: str = ""
    # Trusted proxy IPs (comma-separated). Used for X-Forwarded-For in production.
    trusted_proxy_ips: str = ""
    # Заголовок с id запроса (принимается от прокси, возвращается в ответе)
    request_id_header: str = "X-Request-Id"

    # ===========================================
    # STORAGE (flat JSON document + note files)
    # ===========================================
    data_file: str = "data/data.json"
    # Каталог с файлами заметок; отдаётся только через /notes/{id}/stream
    notes_dir: str = "data/secure_notes"

    # ===========================================
    # SESSION
    # ===========================================
    session_secret: str  # Required, no default
    session_cookie_name: str = "session"
    session_ttl: int = 7 * 24 * 3600  # 7 days
    session_cookie_secure: bool = False  # Set True in production (HTTPS)
    session_cookie_samesite: str = "lax"

    # ===========================================
    # PAYMENT GATEWAY (Razorpay)
    # ===========================================
    razorpay_key_id: str = "test_key"
    razorpay_key_secret: str = "test_secret"
    razorpay_api_base: str = "https://api.razorpay.com/v1"
    payment_currency: str = "INR"
    # Проверка подписи callback'а шлюза перед verify-payment. Выключать только локально.
    payment_signature_required: bool = True
    gateway_timeout: float = 15.0

    # ===========================================
    # EMAIL (SMTP)
    # ===========================================
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""  # Empty = email disabled
    smtp_password: str = ""
    email_timeout: float = 10.0

    # ===========================================
    # AUDIT SHEET (SheetDB-style endpoint)
    # ===========================================
    sheetdb_url: str = ""  # Empty = sheet logging disabled
    audit_timeout: float = 10.0

    # ===========================================
    # REDIS (login rate limit)
    # ===========================================
    redis_url: str = "redis://localhost:6379/0"
    login_rate_limit_attempts: int = 5
    login_rate_limit_window_seconds: int = 900  # 15 min

    # ===========================================
    # BOOTSTRAP ADMIN
    # ===========================================
    # Если оба заданы и в хранилище нет администратора - создаётся при старте.
    admin_email: str = ""
    admin_password: str = ""

    # ===========================================
    # LOGGING
    # ===========================================
    log_level: str = "INFO"
    log_file: str | None = None
    log_max_bytes: int = 10_000_000
    log_backup_count: int = 5

    @field_validator("payment_currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("session_secret")
    @classmethod
    def validate_session_secret(cls, v: str) -> str:
        """Ensure session secret is reasonably secure."""
        if len(v) < 16:
            raise ValueError("session_secret must be at least 16 characters")
        if v in ("changeme", "secret", "password", "admin"):
            raise ValueError("session_secret is too weak, please change it")
        return v

    @property
    def trusted_proxy_ips_set(self) -> set[str]:
        """Get trusted proxy IPs as a set."""
        return {ip.strip() for ip in self.trusted_proxy_ips.split(",") if ip.strip()}

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Игнорировать неизвестные поля из .env


settings = Settings()
