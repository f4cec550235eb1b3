"""
Rubric loading by job role.
"""
import json
import logging
import os
import re
from typing import Optional

from pydantic import ValidationError

from app.core import config
from app.schemas.rubric import RubricDefinition, RubricItem

logger = logging.getLogger(__name__)

DEFAULT_RUBRIC = RubricDefinition(
    name="General",
    items=[
        RubricItem(id="structure", label="논리 구조", keywords=["구조", "정리", "논리"]),
        RubricItem(id="action", label="행동 중심", keywords=["행동", "실행", "어떻게"]),
        RubricItem(id="result", label="결과/수치", keywords=["결과", "성과", "%", "건"]),
        RubricItem(id="collab", label="협업/소통", keywords=["협업", "조율", "보고"]),
        RubricItem(id="insight", label="인사이트", keywords=["원인", "분석", "인사이트"]),
    ],
    suggestions=[
        "결론을 먼저 한 문장으로 말해 보세요.",
        "성과 수치와 영향도를 함께 제시해 보세요.",
    ],
)

SAFE_ROLE = re.compile(r"[^a-z0-9_\-]+")


def rubric_filename(job_role: Optional[str]) -> str:
    """Map a job role to a rubric file name, e.g. 'Backend Dev' -> 'backend_dev.json'."""
    slug = SAFE_ROLE.sub("_", (job_role or "general").strip().lower()).strip("_")
    return f"{slug or 'general'}.json"


def load_rubric(job_role: Optional[str], rubrics_dir: Optional[str] = None) -> RubricDefinition:
    """
    Load the rubric for a job role.
    
    Falls back to the built-in general rubric when the role file is missing,
    unreadable or invalid.
    """
    directory = rubrics_dir or config.RUBRICS_DIR
    path = os.path.join(directory, rubric_filename(job_role))
    if not os.path.exists(path):
        logger.debug(f"No rubric file for role={job_role!r}, using general rubric")
        return DEFAULT_RUBRIC

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        rubric = RubricDefinition.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Invalid rubric file {path}, using general rubric: {e}")
        return DEFAULT_RUBRIC

    if not rubric.items:
        logger.warning(f"Rubric file {path} has no items, using general rubric")
        return DEFAULT_RUBRIC
    return rubric
