"""
Schemas - Knowledge Models

Stored trigger/response records for the private knowledge store.
"""

from typing import List, Optional

from pydantic import BaseModel


class KnowledgeRecord(BaseModel):
    id: Optional[str] = None
    trigger_words: List[str]
    trigger_type: str
    response_text: str
