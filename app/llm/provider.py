"""
Capability interfaces for the optional external providers.

The report pipeline only talks to TextGenerator and Embedder. When a provider
is not configured the null implementations are used, so callers never branch
on configuration.
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List
from dataclasses import dataclass

from app.core.exceptions import ProviderUnavailableError


@dataclass
class LLMResponse:
    """Standardized LLM response."""
    content: str
    tokens_in: int = 0
    tokens_out: int = 0
    model: str = ""
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


class TextGenerator(ABC):
    """Generative text provider."""
    
    @abstractmethod
    def generate(
        self,
        system: str,
        user: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> Optional[str]:
        """
        Generate one completion.
        
        Args:
            system: System instruction
            user: User prompt
            model: Model identifier (provider default when None)
            temperature: Sampling temperature (provider default when None)
            
        Returns:
            Generated text, or None when nothing was produced
        """
        pass


class Embedder(ABC):
    """Text embedding provider."""
    
    @abstractmethod
    def embed(self, text: str, model: Optional[str] = None) -> List[float]:
        """Return the embedding vector for text."""
        pass


class NullTextGenerator(TextGenerator):
    """Generator used when generative text is disabled; always yields None."""

    def generate(self, system, user, model=None, temperature=None) -> Optional[str]:
        return None


class NullEmbedder(Embedder):
    """Embedder used when embeddings are disabled; callers fall back to keywords."""

    def embed(self, text: str, model: Optional[str] = None) -> List[float]:
        raise ProviderUnavailableError("Embedding provider not configured")
