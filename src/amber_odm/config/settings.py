"""ODM settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if specified)
  2. Environment variables (AMBER_ODM_ prefix)
  3. Default values
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

SUPPORTED_BACKENDS = ("elasticsearch", "opensearch")


class DatabaseSettings(BaseModel):
    """Connection settings for one named database."""

    backend: str = Field(default="elasticsearch", description="Client library: elasticsearch, opensearch")
    hosts: list[str] = Field(default_factory=list, description="Cluster node URLs")
    cloud_id: str | None = Field(default=None, description="Elastic Cloud deployment id")
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    api_key: str | None = Field(default=None, description="Encoded API key")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    request_timeout: float | None = Field(default=None, description="Per-request timeout in seconds")
    max_retries: int | None = Field(default=None, description="Retries performed by the client")
    retry_on_timeout: bool | None = Field(default=None, description="Retry requests that timed out")
    extra: dict[str, Any] = Field(default_factory=dict, description="Additional client keyword arguments")

    @field_validator("backend", mode="before")
    @classmethod
    def _normalize_backend(cls, v: Any) -> str:
        return str(v).strip().lower()

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            import json

            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)

    def is_empty(self) -> bool:
        """True when no cluster location is configured."""
        return not self.hosts and not self.cloud_id

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the client class of :attr:`backend`."""
        kwargs: dict[str, Any] = {}
        if self.hosts:
            kwargs["hosts"] = list(self.hosts)
        if not self.verify_certs:
            kwargs["verify_certs"] = False
        if self.max_retries is not None:
            kwargs["max_retries"] = self.max_retries
        if self.retry_on_timeout is not None:
            kwargs["retry_on_timeout"] = self.retry_on_timeout

        if self.backend == "opensearch":
            if self.username and self.password:
                kwargs["http_auth"] = (self.username, self.password)
            if self.request_timeout is not None:
                kwargs["timeout"] = self.request_timeout
        else:
            if self.cloud_id:
                kwargs["cloud_id"] = self.cloud_id
            if self.username and self.password:
                kwargs["basic_auth"] = (self.username, self.password)
            if self.api_key:
                kwargs["api_key"] = self.api_key
            if self.request_timeout is not None:
                kwargs["request_timeout"] = self.request_timeout

        kwargs.update(self.extra)
        return kwargs


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")
    library_log_level: str | None = Field(
        default=None,
        description="Level for amber_odm loggers only; follows log_level when unset",
    )


class Settings(BaseSettings):
    """Root settings.

    Configuration is loaded from environment variables with the AMBER_ODM_ prefix.
    Nested settings use double underscores, and the database map is read as JSON:

        AMBER_ODM_OBSERVABILITY__LOG_LEVEL=debug
        AMBER_ODM_DATABASES='{"main": {"hosts": ["http://localhost:9200"]}}'
    """

    model_config = {
        "env_prefix": "AMBER_ODM_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    databases: dict[str, DatabaseSettings] = Field(default_factory=dict, description="Settings per database id")
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from a YAML configuration file.

        Keys set in the YAML file win over environment variables; keys it
        leaves out are still read from the environment.

        Args:
            path: Path to the YAML config file.

        Returns:
            Populated Settings instance.
        """
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
