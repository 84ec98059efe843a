from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulerConfig(BaseModel):
    daily_job_cron: str = "10 0 * * *"  # 00:10 every day
    timezone: str = "Asia/Seoul"


class ServiceEndpoint(BaseModel):
    """Connection settings for one downstream ERP service."""
    url: str
    timeout: float = 5.0
    max_retries: int = 2


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    app_name: str = Field(default="erp-vacation", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="SERVER_HOST")
    server_port: int = Field(default=8080, alias="SERVER_PORT")

    database_url: str = Field(default="sqlite:///data/vacation.db", alias="DATABASE_URL")
    data_dir: Path = Field(default=Path("data"), alias="DATA_DIR")
    logs_dir: Path = Field(default=Path("logs"), alias="LOGS_DIR")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cors_allow_origins_str: str = Field(default="http://localhost:3000", alias="ALLOW_ORIGINS")
    api_key: str = Field(default="", alias="API_KEY")

    # Inter-service HTTP clients
    http_clients_enabled: bool = Field(default=True, alias="ENABLE_HTTP_CLIENTS")
    hr_service_url: str = Field(default="http://localhost:8081", alias="HR_SERVICE_URL")
    payroll_service_url: str = Field(default="http://localhost:8082", alias="PAYROLL_SERVICE_URL")
    http_client_timeout: float = Field(default=5.0, alias="HTTP_CLIENT_TIMEOUT")
    http_client_max_retries: int = Field(default=2, alias="HTTP_CLIENT_MAX_RETRIES")

    # Leave policy
    annual_leave_days: float = Field(default=15.0, alias="ANNUAL_LEAVE_DAYS")
    sick_leave_days: float = Field(default=10.0, alias="SICK_LEAVE_DAYS")
    max_carryover_days: float = Field(default=5.0, alias="MAX_CARRYOVER_DAYS")

    scheduler: SchedulerConfig = SchedulerConfig()
    scheduler_enabled: bool = Field(default=True, alias="ENABLE_SCHEDULER")
    scheduler_cron_override: Optional[str] = Field(default=None, alias="DAILY_JOB_CRON")
    scheduler_timezone_override: Optional[str] = Field(default=None, alias="SCHEDULER_TIMEZONE")

    write_rate_limit: str = Field(default="30/minute", alias="WRITE_RATE_LIMIT")

    api_prefix: str = "/api"

    @model_validator(mode="after")
    def _apply_scheduler_overrides(self) -> "Settings":
        if self.scheduler_cron_override:
            self.scheduler.daily_job_cron = self.scheduler_cron_override
        if self.scheduler_timezone_override:
            self.scheduler.timezone = self.scheduler_timezone_override
        return self

    @property
    def cors_allow_origins(self) -> List[str]:
        """Get CORS allowed origins as a list."""
        return [
            item.strip() for item in self.cors_allow_origins_str.split(",") if item.strip()
        ] if self.cors_allow_origins_str else ["http://localhost:3000"]

    @property
    def service_endpoints(self) -> Dict[str, ServiceEndpoint]:
        """Downstream services keyed by the name their HTTP client is registered under."""
        return {
            "hr": ServiceEndpoint(
                url=self.hr_service_url,
                timeout=self.http_client_timeout,
                max_retries=self.http_client_max_retries,
            ),
            "payroll": ServiceEndpoint(
                url=self.payroll_service_url,
                timeout=self.http_client_timeout,
                max_retries=self.http_client_max_retries,
            ),
        }


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.logs_dir.mkdir(parents=True, exist_ok=True)
    return settings
