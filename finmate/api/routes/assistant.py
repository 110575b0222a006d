from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from finmate.api.deps import get_current_user_id
from finmate.core.database import get_db
from finmate.core.errors import BadRequestError
from finmate.schemas.assistant import ChatRequest, ChatResponse, ReceiptScanResponse
from finmate.services import assistant

router = APIRouter(tags=["Assistant"])


@router.post("/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    reply = await assistant.ask_assistant(db, user_id, req.message, req.history)
    return ChatResponse(reply=reply)


@router.post("/receipts/scan", response_model=ReceiptScanResponse)
async def scan_receipt(image: UploadFile = File(...), user_id: int = Depends(get_current_user_id)):
    content = await image.read()
    if not content:
        raise BadRequestError("Please provide a receipt image")
    text = await assistant.scan_receipt(image.filename or "receipt", content, image.content_type)
    return ReceiptScanResponse(success=True, data=text)
