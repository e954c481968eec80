from pathlib import Path
from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings

# .env lives at the project root (one level above this package)
_ENV_FILE = str(Path(__file__).parent.parent / ".env")


def _minutes(raw: str) -> tuple[int, ...]:
    values = sorted({int(part) for part in str(raw).split(",") if part.strip()})
    for v in values:
        if not 0 <= v < 60:
            raise ValueError(f"minute offset out of range: {v}")
    return tuple(values)


class Settings(BaseSettings):
    # Database: prefer DATABASE_URL if set, otherwise build from POSTGRES_* vars
    database_url: str = Field(default="", alias="DATABASE_URL")
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "hq_sales"
    postgres_user: str = "hq_user"
    postgres_password: str = ""
    db_ssl: bool = False

    # Hosted storage holding the POS extract
    supabase_url: str = ""
    supabase_service_key: str = ""
    sales_bucket: str = "sales-exports"
    sales_object_key: str = "daily_sales.xlsx"

    # Slack
    slack_webhook_url: str = ""

    # Refresh trigger (comma separated minute offsets within each hour)
    refresh_minutes: str = "5,35"
    refresh_buffer_seconds: int = 2
    sync_minutes: str = "0,30"

    # API
    cors_origins: str = "*"             # comma separated

    business_timezone: str = "Asia/Kolkata"
    upsert_batch_size: int = 2000

    def get_db_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    def refresh_offsets(self) -> tuple[int, ...]:
        return _minutes(self.refresh_minutes)

    def sync_offsets(self) -> tuple[int, ...]:
        return _minutes(self.sync_minutes)

    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()] or ["*"]

    model_config = {
        "env_file": _ENV_FILE,
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
