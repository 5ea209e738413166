from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "Admin Notices"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ACCESS_TOKEN_COOKIE: str = "access_token"
    NONCE_TTL_MINUTES: int = 1440
    DATABASE_URL: str = "sqlite+pysqlite:///./notices.db"
    AJAX_URL: str = "/admin/admin-ajax"
    DEFAULT_SCREEN: str = "dashboard"
    NOTICES_FILE: str = ""
    SUPERADMIN_USERNAME: str = "superadmin"
    SUPERADMIN_EMAIL: str = "superadmin@example.com"
    SUPERADMIN_PASSWORD: str = "change-me"
    METRICS_ENABLED: bool = True

settings = Settings()
