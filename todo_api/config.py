from functools import lru_cache
from typing import Annotated, Any, Literal
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from todo_api.identity.validators import validate_identity_settings


class Settings(BaseSettings):
    # Application Configuration
    TODO_API_VERSION: str = "v0.1.x"
    API_NAME: str = "Todo API"
    API_SUMMARY: str = "A multi-user to-do list API with per-user task ownership"

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    USER_AGENT: str = "TodoAPI"

    CORS_ENABLED: bool = False
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["*"]

    # Database Configuration
    REDIS_URL: str = "redis://localhost:6379"
    REDIS_SOCKET_TIMEOUT: float = 5.0
    POSTGRES_URL: str = "postgresql://localhost:5432/todos"  # Assumes a local Postgres db named 'todos' exists

    TODO_STORE_BACKEND: Literal["postgres", "redis"] = "postgres"
    TODO_STORE_NAMESPACE: str = "todos"

    # Identity Provider
    IDENTITY_PROVIDER: Literal["http", "static"] = "http"
    IDENTITY_VERIFY_URL: str | None = None
    IDENTITY_UID_CLAIMS: Annotated[list[str], NoDecode] = ["uid", "sub", "user_id"]
    IDENTITY_STATIC_TOKENS: Annotated[dict[str, str], NoDecode] = {}
    IDENTITY_REQUEST_TIMEOUT: float = 10.0

    # OpenTelemetry Settings
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "todo-api"

    @model_validator(mode="after")
    def validate_identity_provider(self):
        return validate_identity_settings(self)

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("CORS_ORIGINS", "IDENTITY_UID_CLAIMS", mode="before")
    def validate_list_from_string(cls, v: Any):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("IDENTITY_STATIC_TOKENS", mode="before")
    def validate_token_map_from_string(cls, v: Any):
        """Accept 'token-a:user-a,token-b:user-b' in addition to a JSON object."""
        if isinstance(v, str):
            tokens: dict[str, str] = {}
            for item in v.split(","):
                if not item.strip():
                    continue
                token, separator, uid = item.strip().partition(":")
                if not separator or not token or not uid:
                    raise ValueError(
                        "IDENTITY_STATIC_TOKENS entries must look like 'token:uid'"
                    )
                tokens[token] = uid
            return tokens
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()
