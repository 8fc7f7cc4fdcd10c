# api/schemas.py

from typing import List, Optional
from pydantic import BaseModel


class SpanSchema(BaseModel):
    id: int
    start: int
    end: int
    message: str
    choices: List[str]
    actionable: bool
    label: str


class NoteStateResponse(BaseModel):
    name: Optional[str] = None
    content: str
    generation: int
    state: str
    status: Optional[str] = None
    spans: List[SpanSchema]


class NoteListResponse(BaseModel):
    notes: List[str]


class SaveRequest(BaseModel):
    name: Optional[str] = None


class EditRequest(BaseModel):
    start: int
    end: int
    text: str = ""


class ApplyRequest(BaseModel):
    span_id: int
    choice_index: int = 0
    generation: Optional[int] = None


class RunSchema(BaseModel):
    text: str
    start: int
    highlighted: bool
    span_id: Optional[int] = None


class LineSchema(BaseModel):
    number: int
    start: int
    runs: List[RunSchema]


class LayoutResponse(BaseModel):
    generation: int
    lines: List[LineSchema]


class ErrorResponse(BaseModel):
    error_code: str
    message: str
