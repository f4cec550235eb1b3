"""
Provider router: picks the generator and embedder for one evaluation.
"""
import logging
from typing import Tuple

from app.core.flags import AnalyticsFlags
from app.llm.provider import TextGenerator, Embedder, NullTextGenerator, NullEmbedder

logger = logging.getLogger(__name__)

# Feature -> model mapping; None means the configured analysis model
MODEL_ROUTING = {
    "report_summary": None,
    "model_answer": None,
}


def get_model_for_feature(feature: str, flags: AnalyticsFlags) -> str:
    """Return the chat model used for a narrative feature."""
    return MODEL_ROUTING.get(feature) or flags.analysis_model


def is_model_available(flags: AnalyticsFlags) -> bool:
    """Check if OpenAI is configured for these flags."""
    return flags.provider_available


def get_providers(flags: AnalyticsFlags) -> Tuple[TextGenerator, Embedder]:
    """
    Build providers for the given flags.
    
    A disabled flag, a missing API key or a client that fails to initialize
    all resolve to the null implementations.
    """
    generator: TextGenerator = NullTextGenerator()
    embedder: Embedder = NullEmbedder()
    if not (flags.use_openai or flags.use_embeddings) or not is_model_available(flags):
        return generator, embedder

    try:
        from app.llm.openai_provider import OpenAIProvider
        provider = OpenAIProvider(
            api_key=flags.api_key,
            model=flags.analysis_model,
            embedding_model=flags.embedding_model,
            temperature=flags.temperature,
        )
    except Exception as e:
        logger.warning(f"OpenAI provider unavailable, using deterministic fallbacks: {e}")
        return generator, embedder

    if flags.use_openai:
        generator = provider
    if flags.use_embeddings:
        embedder = provider
    return generator, embedder
