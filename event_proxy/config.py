"""
Application configuration using pydantic-settings.

Settings are read from the environment once. The values the event pipeline
actually needs (the expected auth digest and the queue-name table) are frozen
into a ProxyConfig at startup - fail fast if anything is missing.
"""
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from pydantic_settings import BaseSettings

from event_proxy.exceptions import ConfigurationError
from event_proxy.utils.hashing import create_hash

NOTIFICATION_TYPES = ("Bounce", "Complaint", "Delivery")


class Settings(BaseSettings):
    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    # Webhook authentication - shared secret passed as ?auth=<secret>
    auth: str = ""

    # Destination queues: {queue_prefix}-{bounce|complaint|delivery}-{sqs_suffix}
    sqs_suffix: str = ""
    queue_prefix: str = "fxa-email"

    # Redis (queue transport)
    redis_url: str = "redis://localhost:6379/0"

    # Sentry
    sentry_dsn: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def build_queue_names(prefix: str, suffix: str) -> Mapping[str, str]:
    """Map each notification type to its destination queue name."""
    return MappingProxyType({
        notification_type: f"{prefix}-{notification_type.lower()}-{suffix}"
        for notification_type in NOTIFICATION_TYPES
    })


@dataclass(frozen=True)
class ProxyConfig:
    """
    Immutable runtime configuration for the event pipeline.

    Built once at process start and handed to the authenticator and
    dispatcher, so nothing in the core reads the environment.
    """
    auth_digest: str
    queues: Mapping[str, str]

    @classmethod
    def from_values(cls, auth_secret: str, queue_suffix: str, queue_prefix: str = "fxa-email") -> "ProxyConfig":
        missing = []
        if not auth_secret:
            missing.append("AUTH")
        if not queue_suffix:
            missing.append("SQS_SUFFIX")
        if missing:
            raise ConfigurationError(f"Missing config: {', '.join(missing)}")

        return cls(
            auth_digest=create_hash(auth_secret),
            queues=build_queue_names(queue_prefix, queue_suffix),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProxyConfig":
        return cls.from_values(settings.auth, settings.sqs_suffix, settings.queue_prefix)
