"""API request and response models."""
from typing import List, Optional
from pydantic import BaseModel, Field


class ConvertResponse(BaseModel):
    """Result of an upload conversion."""
    success: bool
    message: str
    file_id: str = Field(serialization_alias="fileId")


class LayoutRequest(BaseModel):
    """Text to lay out for a page preview."""
    text: str = ""
    filename: str = "Document.txt"


class RunModel(BaseModel):
    kind: str
    text: str
    x: float
    y: float
    font: str
    size: float
    color: List[float]


class PageModel(BaseModel):
    number: int
    width: float
    height: float
    runs: List[RunModel]


class LayoutResponse(BaseModel):
    total_pages: int
    pages: List[PageModel]


class FormatRequest(BaseModel):
    """Text to restructure with the AI formatter."""
    text: Optional[str] = None
    template: str = "standard"


class FormatResponse(BaseModel):
    formatted_text: str = Field(serialization_alias="formattedText")
    model_used: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
