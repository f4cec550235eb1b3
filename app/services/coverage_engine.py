"""
Rubric coverage engine.

Two interchangeable strategies decide which rubric items the aggregate answer
text satisfies: keyword matching, or embedding similarity against a
representative phrase per item. The embedding strategy falls back to keywords
on any failure, so coverage is always computable.
"""
import logging
import math
import re
from typing import List, Optional, Sequence

from app.core import config
from app.core.rounding import round_int
from app.llm.provider import Embedder, NullEmbedder
from app.schemas.report import CoverageResult
from app.schemas.rubric import RubricDefinition, RubricItem

logger = logging.getLogger(__name__)


def keyword_hit(keyword: str, text: str) -> bool:
    """Case-insensitive search; rubric keywords may be regular expressions."""
    if not keyword:
        return False
    try:
        return re.search(keyword, text, re.IGNORECASE) is not None
    except re.error:
        return re.search(re.escape(keyword), text, re.IGNORECASE) is not None


def _result(matched: List[str], missing: List[str], rubric: RubricDefinition, method: str) -> CoverageResult:
    total = len(rubric.items)
    return CoverageResult(
        coverage_pct=round_int(len(matched) / total * 100) if total else 0,
        matched=matched,
        missing=missing,
        suggested_phrases=list(rubric.suggestions),
        method=method,
    )


def keyword_coverage(text: str, rubric: RubricDefinition) -> CoverageResult:
    text = text or ""
    matched, missing = [], []
    for item in rubric.items:
        hit = any(keyword_hit(kw, text) for kw in item.keywords)
        (matched if hit else missing).append(item.label)
    return _result(matched, missing, rubric, "keyword")


def representative_phrase(item: RubricItem) -> str:
    """Worked example if any, else the keywords, else the label."""
    if item.examples and item.examples[0]:
        return item.examples[0]
    if item.keywords:
        return " ".join(item.keywords)
    return item.label


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if not a or not b or len(a) != len(b):
        raise ValueError(f"Malformed embedding vectors: len {len(a or [])} vs {len(b or [])}")
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if not norm_a or not norm_b:
        raise ValueError("Zero-length embedding vector")
    similarity = dot / (norm_a * norm_b)
    if math.isnan(similarity):
        raise ValueError("Embedding similarity is NaN")
    return similarity


def embedding_coverage(
    text: str,
    rubric: RubricDefinition,
    embedder: Embedder,
    model: Optional[str] = None,
    threshold: float = config.SIM_THRESHOLD,
) -> CoverageResult:
    """Semantic coverage; falls back to keyword coverage on any failure."""
    try:
        document = embedder.embed(text or "", model=model)
        matched, missing = [], []
        for item in rubric.items:
            phrase_vector = embedder.embed(representative_phrase(item), model=model)
            similarity = cosine_similarity(document, phrase_vector)
            (matched if similarity >= threshold else missing).append(item.label)
        return _result(matched, missing, rubric, "embedding")
    except Exception as e:
        logger.warning(f"Embedding coverage failed, falling back to keywords: {e}")
        return keyword_coverage(text, rubric)


def evaluate_coverage(
    text: str,
    rubric: RubricDefinition,
    use_embeddings: bool = False,
    embedder: Optional[Embedder] = None,
    model: Optional[str] = None,
    threshold: float = config.SIM_THRESHOLD,
) -> CoverageResult:
    """
    Compute rubric coverage with the strategy chosen for this evaluation.
    
    Args:
        text: Aggregate answer text
        rubric: Rubric to evaluate against
        use_embeddings: Per-evaluation strategy switch
        embedder: Embedding provider (null embedder when omitted)
        model: Embedding model identifier
        threshold: Similarity needed to count an item as matched
    """
    if not rubric.items:
        return _result([], [], rubric, "keyword")
    if use_embeddings:
        return embedding_coverage(text, rubric, embedder or NullEmbedder(), model=model, threshold=threshold)
    return keyword_coverage(text, rubric)
