"""Chat assistant and receipt OCR backed by external HTTP providers.

Neither provider can write financial data: the assistant only reads the
reporting layer to build its prompt, and OCR only returns text.
"""
import logging

import requests
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from finmate.config import settings
from finmate.core import clock
from finmate.core.errors import UpstreamError
from finmate.schemas.assistant import ChatTurn
from finmate.services.common import Period
from finmate.services.reports import ReportService
from finmate.services.transactions import TransactionService

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, Finpet is taking a little nap. Please try again in a moment."

SYSTEM_PROMPT = """You are Finpet, the friendly personal-finance assistant of the FinMate app.

{context}

Your tasks:
1. Answer briefly and kindly.
2. Use the financial data above to give advice (for example, warn when spending outpaces income).
3. When asked about recent transactions, list them from the data provided.
4. Encourage the user to save and manage money well.
5. Always call yourself "Finpet"."""


def _money(value: float) -> str:
    return f"{value:,.0f}"


async def build_financial_context(db: AsyncSession, user_id: int) -> str:
    today = clock.today()
    period = Period.for_month(today.year, today.month)

    summary = await ReportService.period_summary(db, user_id, period)
    lines = [
        "Current financial data of the user:",
        "",
        f"== OVERVIEW {today.month}/{today.year} ==",
        f"- Total income: {_money(summary.total_income)}",
        f"- Total expense: {_money(summary.total_expense)}",
        f"- Balance: {_money(summary.balance)}",
    ]

    recent = await TransactionService.list_transactions(db, user_id, limit=5)
    if recent:
        lines += ["", "== RECENT TRANSACTIONS =="]
        for t in recent:
            label = "Income" if t.type == "income" else "Expense"
            lines.append(
                f"- [{t.transaction_date:%d/%m/%Y}] {label} {_money(t.amount)}: "
                f"{t.category_name} ({t.note or 'no note'})"
            )

    top = await ReportService.top_expense_categories(db, user_id, period, limit=3)
    if top:
        lines += ["", "== TOP SPENDING THIS MONTH =="]
        lines += [f"- {c.category_name}: {_money(c.total_amount)}" for c in top]

    return "\n".join(lines)


def _strip_reasoning(content) -> str:
    # Reasoning models may prefix the answer with <think>...</think>
    if isinstance(content, str):
        if "<think>" in content and "</think>" in content:
            content = content.split("</think>", 1)[1]
        return content.strip()

    parts = []
    for part in content or []:
        if part.get("type") == "reasoning":
            continue
        parts.append(part.get("text", ""))
    return "".join(parts).strip()


def _post_chat_completion(messages: list[dict]) -> str:
    if not settings.GROQ_API_KEY:
        raise UpstreamError("Assistant is not configured.")

    try:
        resp = requests.post(
            settings.GROQ_API_URL,
            headers={
                "Authorization": f"Bearer {settings.GROQ_API_KEY}",
                "Content-Type": "application/json",
            },
            json={
                "model": settings.GROQ_MODEL,
                "messages": messages,
                "temperature": 0.7,
                "max_tokens": 500,
            },
            timeout=settings.EXTERNAL_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Chat provider error: %s", exc)
        raise UpstreamError("Failed to get response from Finpet.") from exc

    choices = data.get("choices") or [{}]
    return _strip_reasoning((choices[0].get("message") or {}).get("content") or "")


async def ask_assistant(db: AsyncSession, user_id: int, message: str, history: list[ChatTurn]) -> str:
    try:
        context = await build_financial_context(db, user_id)
    except Exception:
        logger.exception("Could not assemble financial context for user %s", user_id)
        context = ""

    messages = [{"role": "system", "content": SYSTEM_PROMPT.format(context=context)}]
    messages += [{"role": turn.role, "content": turn.content} for turn in history]
    messages.append({"role": "user", "content": message})

    reply = await run_in_threadpool(_post_chat_completion, messages)
    return reply or FALLBACK_REPLY


def _post_ocr(filename: str, content: bytes, content_type: str | None) -> str:
    if not settings.OCR_API_KEY:
        raise UpstreamError("Receipt scanning is not configured.")

    try:
        resp = requests.post(
            settings.OCR_API_URL,
            files={"file": (filename, content, content_type or "application/octet-stream")},
            data={"apikey": settings.OCR_API_KEY, "language": settings.OCR_LANGUAGE},
            timeout=settings.EXTERNAL_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("OCR provider error: %s", exc)
        raise UpstreamError("Failed to scan receipt.") from exc

    if data.get("IsErroredOnProcessing"):
        logger.error("OCR provider rejected image: %s", data.get("ErrorMessage"))
        raise UpstreamError("Failed to scan receipt.")

    results = data.get("ParsedResults") or []
    return "\n".join(r.get("ParsedText", "") for r in results).strip()


async def scan_receipt(filename: str, content: bytes, content_type: str | None) -> str:
    return await run_in_threadpool(_post_ocr, filename, content, content_type)
