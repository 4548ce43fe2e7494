from functools import lru_cache
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


class Settings(BaseModel):
    database_url: str = Field(default="sqlite:///./lodging.db")
    echo_sql: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    # "today" for the future-date and past-cancellation rules is taken in this zone
    timezone: str = Field(default="UTC")
    update_excludes_self: bool = Field(default=False)


@lru_cache
def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", Settings.model_fields["database_url"].default),
        echo_sql=bool(int(os.getenv("ECHO_SQL", "0"))),
        log_level=os.getenv("LOG_LEVEL", Settings.model_fields["log_level"].default),
        timezone=os.getenv("LODGING_TIMEZONE", Settings.model_fields["timezone"].default),
        update_excludes_self=bool(int(os.getenv("UPDATE_EXCLUDES_SELF", "0"))),
    )
