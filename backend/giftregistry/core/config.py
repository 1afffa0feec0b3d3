from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    project_name: str = "Gift Registry API"
    backend_cors_origins: list[str] = ["*"]

    postgres_host: str = "db"
    postgres_port: int = 5432
    postgres_user: str = "giftregistry"
    postgres_password: str = "giftregistry"
    postgres_db: str = "giftregistry"
    database_url_override: str | None = None

    session_cookie_name: str = "session_id"
    session_cookie_secure: bool = False
    session_lifetime_days: int = 7
    session_renew_threshold_minutes: int = 60

    static_root: str = "frontend"
    upload_dir: str = "frontend/uploads"
    upload_url_prefix: str = "/uploads"
    max_image_size_bytes: int = 5 * 1024 * 1024

    max_wishlists_per_user: int = 50
    max_items_per_wishlist: int = 100
    max_links_per_item: int = 10
    theme_cache_ttl_seconds: int = 3600

    log_level: str = "INFO"
    log_file: str | None = None

    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
