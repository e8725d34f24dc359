"""Configuration settings for the exporter.

Values are read once from the environment (or a ``.env`` file) at import
time.  Nothing here is reloaded while the process runs.
"""

from dataclasses import dataclass

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class ConnectionConfig:
    """Immutable connection parameters for the Greenplum master."""

    host: str
    port: int
    username: str
    password: str
    database: str
    sslmode: str = "disable"


class Settings(BaseSettings):
    """Exporter settings.

    Attributes:
        GREENPLUM_HOST (str): Host of the Greenplum master.
        GREENPLUM_PORT (int): Port of the Greenplum master.
        GREENPLUM_USER (str): Database user used for diagnostic queries.
        GREENPLUM_PASSWORD (str): Password for ``GREENPLUM_USER``.
        GREENPLUM_DATABASE (str): Database to connect to.
        GREENPLUM_SSLMODE (str): SSL mode passed to the driver.
        SAMPLE_INTERVAL_SECONDS (float): Pause between two sampling passes.
        METRICS_HOST (str): Interface the HTTP server binds to.
        METRICS_PORT (int): Port serving ``/metrics`` and ``/ismaster``.
        METRICS_NAMESPACE (str): Prefix of every exported gauge name.
        LOG_LEVEL (str): Root log level.
        LOG_JSON (bool): Emit JSON log lines instead of plain text.
    """

    GREENPLUM_HOST: str = "localhost"
    GREENPLUM_PORT: int = 5432
    GREENPLUM_USER: str = "gpadmin"
    GREENPLUM_PASSWORD: str = ""
    GREENPLUM_DATABASE: str = "postgres"
    GREENPLUM_SSLMODE: str = "disable"

    SAMPLE_INTERVAL_SECONDS: float = Field(default=300.0, gt=0)

    METRICS_HOST: str = "0.0.0.0"
    METRICS_PORT: int = 8080
    METRICS_NAMESPACE: str = "staq"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Accept lower-case level names."""
        return value.upper()

    @property
    def connection_config(self) -> ConnectionConfig:
        """Connection parameters as an immutable value."""
        return ConnectionConfig(
            host=self.GREENPLUM_HOST,
            port=self.GREENPLUM_PORT,
            username=self.GREENPLUM_USER,
            password=self.GREENPLUM_PASSWORD,
            database=self.GREENPLUM_DATABASE,
            sslmode=self.GREENPLUM_SSLMODE,
        )


settings = Settings()
