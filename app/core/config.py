from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings; overridden through environment variables or `.env`."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    environment: str = "development"
    database_url: str = "sqlite:///./app.db"

    access_token_secret: str = "CHANGE_ME_ACCESS"
    refresh_token_secret: str = "CHANGE_ME_REFRESH"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_minutes: int = 60 * 24 * 7

    refresh_cookie_name: str = "jwt"
    refresh_cookie_path: str = "/api/auth"

    storage_root: str = "."
    public_dir: str = "public"

    log_level: str = "INFO"
    log_dir: str = "logs"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def refresh_cookie_max_age(self) -> int:
        return self.refresh_token_expire_minutes * 60


settings = Settings()
