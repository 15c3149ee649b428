"""Pydantic configuration models for the exporter."""

from pydantic import BaseModel, Field, field_validator


class CouchbaseConfig(BaseModel):
    """Connection settings for the cluster's administrative REST API."""
    url: str
    username: str = ""
    password: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')


class RetryConfig(BaseModel):
    """Fixed-interval retry budget."""
    interval_seconds: float = Field(default=20.0, ge=0)
    max_attempts: int = Field(default=8, ge=1)
    timeout_seconds: float = Field(default=60.0, gt=0)


class CollectionConfig(BaseModel):
    """Polling cadence and startup retry budgets."""
    refresh_interval: int = Field(default=60, ge=1)  # Seconds between poll cycles
    node_retry: RetryConfig = Field(default_factory=RetryConfig)
    rebalance_retry: RetryConfig = Field(
        default_factory=lambda: RetryConfig(
            interval_seconds=20.0,
            max_attempts=10,
            timeout_seconds=600.0
        )
    )


class ExporterConfig(BaseModel):
    """Prometheus HTTP endpoint configuration."""
    listen_address: str = "0.0.0.0"
    port: int = Field(default=9091, ge=1, le=65535)
    namespace: str = "cbpernodebucket"

    @field_validator('namespace')
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Metric names may only contain [a-zA-Z0-9_]."""
        if not v.replace('_', '').isalnum():
            raise ValueError('Namespace must contain only letters, digits and underscores')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard level names in any case."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f'Unknown log level: {v}')
        return level


class ExporterSystemConfig(BaseModel):
    """Root configuration model for the exporter."""
    couchbase: CouchbaseConfig
    collection: CollectionConfig = Field(default_factory=CollectionConfig)
    exporter: ExporterConfig = Field(default_factory=ExporterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
