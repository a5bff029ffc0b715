"""
Documentation Retrieval Schemas

The wire shape returned by the get_sarvam_documentation_file tool, plus the
strategy tags attached to scored candidates.

A failed retrieval always has retrieved_file_path = None. error_message
separates "something went wrong" (set) from "nothing relevant" (None).
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel


class MatchStrategy(str, Enum):
    """Which strategy produced a candidate's score"""
    EXACT_FILENAME = "exact_filename_match"
    FILENAME_PATH = "keyword_filename_path_match"
    CONTENT_HEADING = "content_heading_match"
    SINGLE_CANDIDATE = "single_candidate_fallback"


class RetrievalResult(BaseModel):
    """Outcome of one documentation retrieval"""
    retrieved_file_path: Optional[str] = None
    file_content: Optional[str] = None
    status_message: str
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.retrieved_file_path is not None

    @classmethod
    def success(cls, file_path: str, content: str) -> "RetrievalResult":
        return cls(
            retrieved_file_path=file_path,
            file_content=content,
            status_message=f"Successfully retrieved documentation file: {file_path}",
            error_message=None,
        )

    @classmethod
    def failure(cls, status_message: str, error_message: Optional[str] = None) -> "RetrievalResult":
        return cls(
            retrieved_file_path=None,
            file_content=None,
            status_message=status_message,
            error_message=error_message,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
