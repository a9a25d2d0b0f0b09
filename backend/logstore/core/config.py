from pydantic_settings import BaseSettings
from pydantic import Field, field_validator

STORE_NAME = "logstore_last_updated_course_module"


class Settings(BaseSettings):
    PROJECT_NAME: str = "Last Updated Course Module Log Store"
    DATABASE_URL: str = "sqlite:///./logstore.db"
    APP_TIMEZONE: str = "UTC"
    ENABLED_STORES: str = ""
    LOGSTORE_JSONFORMAT: bool = True
    LOGSTORE_LOGLIFETIME: int = 0
    CLEANUP_CRON_HOUR: int = 3
    CLEANUP_CRON_MINUTE: int = 0
    CLEANUP_BATCH_SIZE: int = Field(default=1000, gt=0)

    class Config:
        env_file = ".env"

    @field_validator("APP_TIMEZONE", mode="before")
    @classmethod
    def normalize_app_timezone(cls, value: str) -> str:
        if value is None:
            return "UTC"
        normalized = str(value).strip()
        if not normalized:
            return "UTC"
        return normalized

    @field_validator("ENABLED_STORES", mode="before")
    @classmethod
    def normalize_enabled_stores(cls, value: object) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple, set)):
            value = ",".join(str(item) for item in value)
        return ",".join(name.strip() for name in str(value).split(",") if name.strip())

    @field_validator("LOGSTORE_LOGLIFETIME", mode="before")
    @classmethod
    def normalize_loglifetime(cls, value: object) -> int:
        # Blank or negative lifetimes mean "keep forever".
        if value is None or (isinstance(value, str) and not value.strip()):
            return 0
        lifetime = int(value)
        return lifetime if lifetime > 0 else 0

    @property
    def enabled_store_names(self) -> list[str]:
        return [name for name in self.ENABLED_STORES.split(",") if name]

    def is_store_enabled(self, name: str = STORE_NAME) -> bool:
        return name in self.enabled_store_names


settings = Settings()
