"""
Analytics feature flags.

Flags are resolved once per request with a pure merge:
request override > environment flag > computed default.
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from app.core import config

logger = logging.getLogger(__name__)

TRUE_VALUES = ("1", "true", "on", "yes", "y")
FALSE_VALUES = ("0", "false", "off", "no", "n")


def as_bool(value: Any) -> Optional[bool]:
    """Parse a loose boolean; returns None when the value is unset or unrecognised."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return None


@dataclass(frozen=True)
class AnalyticsFlags:
    """Effective switches and tunables for one report evaluation."""
    use_openai: bool = False
    use_embeddings: bool = False
    embedding_model: str = config.EMBEDDING_MODEL
    similarity_threshold: float = config.SIM_THRESHOLD
    analysis_model: str = config.ANALYSIS_MODEL
    temperature: float = config.ANALYSIS_TEMPERATURE
    api_key: Optional[str] = field(default=None, repr=False)

    @property
    def provider_available(self) -> bool:
        return bool(self.api_key)


def resolve_flags(
    overrides: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> AnalyticsFlags:
    """
    Merge request overrides, environment flags and computed defaults.
    
    Args:
        overrides: Per-request values; recognised keys are "openai" and "embeddings"
        env: Environment mapping (defaults to os.environ)
        
    Returns:
        Immutable AnalyticsFlags
    """
    overrides = overrides or {}
    env = os.environ if env is None else env

    default_openai = bool(env.get("OPENAI_API_KEY"))
    default_embeddings = bool(
        env.get("EMBEDDING_MODEL")
        or env.get("TEXT2VEC_OPENAI_MODEL")
        or env.get("WEAVIATE_HOST")
    )

    use_openai = _first_set(
        as_bool(overrides.get("openai")),
        as_bool(env.get("ANALYTICS_USE_OPENAI")),
        default_openai,
    )
    use_embeddings = _first_set(
        as_bool(overrides.get("embeddings")),
        as_bool(env.get("ANALYTICS_USE_EMBEDDINGS")),
        default_embeddings,
    )

    threshold = _env_float(env, "SIM_THRESHOLD", config.SIM_THRESHOLD)
    temperature = _env_float(env, "ANALYSIS_TEMPERATURE", config.ANALYSIS_TEMPERATURE)

    return AnalyticsFlags(
        use_openai=use_openai,
        use_embeddings=use_embeddings,
        embedding_model=(
            env.get("EMBEDDING_MODEL")
            or env.get("TEXT2VEC_OPENAI_MODEL")
            or config.EMBEDDING_MODEL
        ),
        similarity_threshold=threshold,
        analysis_model=env.get("ANALYSIS_MODEL") or config.ANALYSIS_MODEL,
        temperature=temperature,
        api_key=env.get("OPENAI_API_KEY") or None,
    )


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    if not env.get(name):
        return default
    try:
        return float(env[name])
    except ValueError:
        logger.warning(f"Invalid {name}={env[name]!r}, using {default}")
        return default


def _first_set(*values: Optional[bool]) -> bool:
    for value in values:
        if value is not None:
            return bool(value)
    return False
