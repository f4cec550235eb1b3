"""
OpenAI provider implementation.
"""
import logging
from typing import Optional, Dict, List
from openai import OpenAI, APIError

from app.core import config
from app.llm.provider import LLMResponse, TextGenerator, Embedder

logger = logging.getLogger(__name__)


class OpenAIProvider(TextGenerator, Embedder):
    """OpenAI provider using official OpenAI SDK for chat and embeddings."""
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        embedding_model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize OpenAI client."""
        self.api_key = api_key or config.OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        self.model = model or config.ANALYSIS_MODEL
        self.embedding_model = embedding_model or config.EMBEDDING_MODEL
        self.temperature = config.ANALYSIS_TEMPERATURE if temperature is None else temperature
        self.client = OpenAI(
            api_key=self.api_key,
            timeout=timeout or config.ANALYSIS_TIMEOUT_SEC,
            max_retries=1,
        )
        logger.info("OpenAI provider initialized")
    
    def chat(
        self,
        messages: List[Dict[str, str]],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate a chat completion."""
        model = model or self.model
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=self.temperature if temperature is None else temperature,
                max_tokens=max_tokens or 800,
            )
            
            content = response.choices[0].message.content or ""
            usage = response.usage
            return LLMResponse(
                content=content.strip(),
                tokens_in=usage.prompt_tokens if usage else 0,
                tokens_out=usage.completion_tokens if usage else 0,
                model=model,
                metadata={
                    "finish_reason": response.choices[0].finish_reason,
                }
            )
        except APIError as e:
            logger.error(f"OpenAI API error: {e}", exc_info=True)
            raise
    
    def generate(self, system, user, model=None, temperature=None) -> Optional[str]:
        response = self.chat(
            [
                {"role": "system", "content": system or ""},
                {"role": "user", "content": user or ""},
            ],
            model=model,
            temperature=temperature,
        )
        return response.content or None
    
    def embed(self, text: str, model: Optional[str] = None) -> List[float]:
        """Return the embedding vector for text."""
        try:
            response = self.client.embeddings.create(
                model=model or self.embedding_model,
                input=text or " ",
            )
            return list(response.data[0].embedding)
        except APIError as e:
            logger.error(f"OpenAI embeddings error: {e}", exc_info=True)
            raise
