"""
Schemas - Article Models

Structured content extracted from one fetched page.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ArticleMetadata(BaseModel):
    author: Optional[str] = None
    published_at: Optional[str] = None
    description: Optional[str] = None
    keywords: List[str] = []
    language: Optional[str] = None


class ExtractedArticle(BaseModel):
    """Readable article data derived from raw HTML."""
    url: str = ""
    title: str = "Untitled"
    body_text: str = ""
    metadata: ArticleMetadata = Field(default_factory=ArticleMetadata)
    readability_score: float = Field(0.0, ge=0.0, le=1.0)
