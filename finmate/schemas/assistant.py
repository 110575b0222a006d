from pydantic import BaseModel, Field
from typing import List, Literal


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)
    history: List[ChatTurn] = []


class ChatResponse(BaseModel):
    reply: str


class ReceiptScanResponse(BaseModel):
    success: bool
    data: str
