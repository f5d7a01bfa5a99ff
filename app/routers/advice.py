"""
AI advice router.

  GET  /api/ai/advice  Own advice history, newest first
  POST /api/ai/advice  Ask a question; the answer is generated synchronously
                       and stored

When the language model is unavailable the stored response is a fixed
apology, and the request still succeeds.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.advice_client import AdviceClient
from app.database import get_db
from app.dependencies import get_advice_client, get_current_user
from app.models.user import User
from app.schemas.advice import AdviceRequest, AdviceResponse
from app.services import advice_service

router = APIRouter()


@router.get("", response_model=list[AdviceResponse], summary="List past advice")
async def list_advice(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await advice_service.get_advice_history(db, user.id)


@router.post(
    "",
    response_model=AdviceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Ask for financial advice",
)
async def request_advice(
    request: AdviceRequest,
    user: User = Depends(get_current_user),
    client: AdviceClient = Depends(get_advice_client),
    db: AsyncSession = Depends(get_db),
):
    advice = await advice_service.request_advice(db, user, request.query, client)
    await db.commit()
    return advice
