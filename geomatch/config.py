import os
from functools import lru_cache
from pathlib import Path as _Path

from dotenv import load_dotenv as _load_dotenv
from pydantic import BaseModel, Field

_load_dotenv(dotenv_path=_Path(__file__).resolve().parent.parent / ".env", override=False)

EXCLUSION_POLICY_OUTGOING = "outgoing"
EXCLUSION_POLICY_BIDIRECTIONAL = "bidirectional"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _redis_pubsub_enabled_default() -> bool:
    explicit = os.getenv("REDIS_PUBSUB_ENABLED")
    if explicit is not None:
        return explicit.lower() in ("1", "true", "yes")
    return bool(os.getenv("REDIS_URL"))


def _exclusion_policy_default() -> str:
    value = os.getenv("EXCLUSION_POLICY", EXCLUSION_POLICY_OUTGOING).strip().lower()
    if value not in (EXCLUSION_POLICY_OUTGOING, EXCLUSION_POLICY_BIDIRECTIONAL):
        return EXCLUSION_POLICY_OUTGOING
    return value


class Settings(BaseModel):
    # Support multiple common env var names for Mongo connection string
    mongo_uri: str = Field(
        default_factory=lambda: (
            os.getenv("MONGO_URI")
            or os.getenv("MONGODB_URI")
            or os.getenv("MONGO_URL")
            or ""
        )
    )
    mongo_db: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "geomatch"))
    # Optional: provide a non-SRV fallback URI (e.g., mongodb://127.0.0.1:27017)
    mongo_alt_uri: str = Field(default_factory=lambda: os.getenv("MONGO_ALT_URI", ""))
    # Optional: force direct connection (applies to non-SRV URIs)
    mongo_direct: bool = Field(default_factory=lambda: _env_flag("MONGO_DIRECT"))
    cors_origin: str = Field(default_factory=lambda: os.getenv("CORS_ORIGIN", "http://localhost:5173"))
    port: int = Field(default_factory=lambda: int(os.getenv("PY_BACKEND_PORT", "8081")))

    # Redis (pub/sub for notification events)
    redis_url: str = Field(default_factory=lambda: os.getenv("REDIS_URL", ""))
    redis_pubsub_enabled: bool = Field(default_factory=_redis_pubsub_enabled_default)
    redis_pubsub_prefix: str = Field(default_factory=lambda: os.getenv("REDIS_PUBSUB_PREFIX", "geo"))

    # People search
    default_page_size: int = Field(default_factory=lambda: int(os.getenv("PEOPLE_DEFAULT_PAGE_SIZE", "20")))
    max_page_size: int = Field(default_factory=lambda: int(os.getenv("PEOPLE_MAX_PAGE_SIZE", "100")))
    min_shared_interests: int = Field(default_factory=lambda: int(os.getenv("MIN_SHARED_INTERESTS", "2")))
    # "outgoing": hide people the requester liked/disliked.
    # "bidirectional": also hide people who liked/disliked the requester.
    exclusion_policy: str = Field(default_factory=_exclusion_policy_default)
    # Partner preferences outside alone/any/<gender> accept everybody unless disabled
    unknown_preference_accepts: bool = Field(
        default_factory=lambda: _env_flag("UNKNOWN_PREFERENCE_ACCEPTS", "true")
    )

    # Likes and notifications
    like_message_max_length: int = Field(default_factory=lambda: int(os.getenv("LIKE_MESSAGE_MAX_LENGTH", "500")))
    notification_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("NOTIFICATION_TIMEOUT_SECONDS", "2.0"))
    )
    notification_list_limit: int = Field(default_factory=lambda: int(os.getenv("NOTIFICATION_LIST_LIMIT", "50")))


@lru_cache()
def get_settings() -> Settings:
    return Settings()
