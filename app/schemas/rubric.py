"""
Pydantic schemas for evaluation rubrics.
"""
from typing import List
from pydantic import BaseModel, Field


class RubricItem(BaseModel):
    """One criterion with its keyword patterns and optional worked examples."""
    id: str
    label: str
    keywords: List[str] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)


class RubricDefinition(BaseModel):
    name: str = "General"
    items: List[RubricItem] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
