from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./quantitativo.db"
    APP_NAME: str = "Obra Quantitativo"
    LOG_LEVEL: str = "INFO"

    # Identity — 'local' | 'remote' | 'none'
    AUTH_BACKEND: str = "local"
    JWT_SECRET: str = ""  # REQUIRED for the local backend — fail loudly if missing at auth time
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_EXPIRE_MINUTES: int = 60
    JWT_REFRESH_EXPIRE_DAYS: int = 30

    # Supabase — optional; without it the static catalog is used and audit rows are dropped
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    REMOTE_CATALOG_SCHEMA: str = "normalized"  # 'normalized' | 'flat'
    REMOTE_TIMEOUT_SECONDS: float = 10.0

    AUDIT_QUEUE_SIZE: int = 500

    class Config:
        env_file = ".env"


settings = Settings()


def remote_configured() -> bool:
    """Check if Supabase credentials are set."""
    return bool(settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY)
