from __future__ import annotations

from typing import Any, Dict, Literal, Union

from pydantic import BaseModel

from .analysis import Lead


class _Event(BaseModel):
    @property
    def is_terminal(self) -> bool:
        return False

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json()}\n\n"


class ProgressEvent(_Event):
    type: Literal["progress"] = "progress"
    message: str


class ResultEvent(_Event):
    type: Literal["result"] = "result"
    lead: Dict[str, Any]

    @classmethod
    def for_lead(cls, lead: Lead) -> "ResultEvent":
        return cls(lead=lead.to_dict())


class CompleteEvent(_Event):
    type: Literal["complete"] = "complete"
    message: str = "Search completed successfully"

    @property
    def is_terminal(self) -> bool:
        return True


class ErrorEvent(_Event):
    type: Literal["error"] = "error"
    message: str = "An error occurred during search"

    @property
    def is_terminal(self) -> bool:
        return True


SearchEvent = Union[ProgressEvent, ResultEvent, CompleteEvent, ErrorEvent]
