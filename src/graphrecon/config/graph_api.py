"""Graph storage API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import float_env_var, optional_env_var, require_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

DEFAULT_GRAPH_API_TIMEOUT_SECONDS = 30.0
DEFAULT_GRAPH_API_MAX_CALLS_PER_SECOND = 20.0


def graph_api_retry_policy() -> RetryPolicy:
    """Retry only GET lookups; validation and writes are sent exactly once."""

    return RetryPolicy(allowed_methods=frozenset({"GET"}))


@dataclass(frozen=True, slots=True)
class GraphApiConfig:
    """Where the graph API lives and who acts against it by default."""

    resilience: ResilienceConfig
    actor_id: str | None = None
    owned_by_id: str | None = None

    @property
    def base_url(self) -> str | None:
        return self.resilience.base_url


def get_graph_api_config(*, resilience: ResilienceConfig | None = None) -> GraphApiConfig:
    base_url = require_env_var("GRAPH_API_BASE_URL")
    timeout = float_env_var(
        "GRAPH_API_TIMEOUT_SECONDS",
        default=DEFAULT_GRAPH_API_TIMEOUT_SECONDS,
    )
    max_calls = float_env_var(
        "GRAPH_API_MAX_CALLS_PER_SECOND",
        default=DEFAULT_GRAPH_API_MAX_CALLS_PER_SECOND,
    )
    cache_path = get_storage_config().http_cache_path()

    return GraphApiConfig(
        resilience=resilience
        or ResilienceConfig(
            name="graph-api",
            base_url=base_url.rstrip("/"),
            timeout_seconds=timeout,
            retry=graph_api_retry_policy(),
            ratelimit=RateLimit(max_calls=max(1, int(max_calls)), per_seconds=1.0),
            cache=CacheConfig(backend="sqlite", sqlite_path=str(cache_path)),
        ),
        actor_id=optional_env_var("GRAPH_API_ACTOR_ID"),
        owned_by_id=optional_env_var("GRAPH_API_OWNED_BY_ID"),
    )
