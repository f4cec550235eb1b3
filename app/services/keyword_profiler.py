"""
Keyword profiler for Korean interview answers.
"""
import re
from collections import Counter
from typing import Dict, List

STOPWORDS = frozenset([
    "안녕하세요", "저는", "제가", "그리고", "그러나", "하지만", "또는", "및",
    "합니다", "했습니다", "있습니다", "입니다", "요", "은", "는", "이", "가",
    "을", "를", "에", "의", "와", "과", "도", "으로", "에서", "까지", "부터",
    "한", "좀", "거", "네", "음", "어", "그", "아", "했다", "같습니다", "수", "더", "또",
])

# Runs of Unicode letters/digits (underscore excluded)
TOKEN_PATTERN = re.compile(r"[^\W_]+")
JAMO_PATTERN = re.compile(r"^[ㄱ-ㅎ]$")

FALLBACK_TOKEN_LIMIT = 100
FALLBACK_TOP_N = 8


def tokenize(text: str) -> List[str]:
    return TOKEN_PATTERN.findall((text or "").lower())


def _top(tokens: List[str], top_n: int) -> List[Dict[str, object]]:
    counts = Counter(tokens)
    return [{"word": word, "count": count} for word, count in counts.most_common(top_n)]


def keyword_counts(text: str, top_n: int = 12) -> List[Dict[str, object]]:
    """
    Top-N keyword frequencies, most frequent first.
    
    Stopwords, single characters and lone jamo are dropped. When that leaves
    nothing, a relaxed pass over the first tokens keeps everything, so any
    text containing a letter or digit yields at least one keyword.
    """
    if top_n <= 0:
        return []
    tokens = tokenize(text)
    strict = [
        token for token in tokens
        if len(token) >= 2 and token not in STOPWORDS and not JAMO_PATTERN.match(token)
    ]
    top = _top(strict, top_n)
    if top:
        return top
    return _top(tokens[:FALLBACK_TOKEN_LIMIT], min(FALLBACK_TOP_N, top_n))
