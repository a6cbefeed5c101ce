"""API endpoints - Teste sem WhatsApp, health check e listagem de alunos."""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

import app_state
from agents.message_handler import MessageHandler
from core.exceptions import InvalidInputError
from core.logger import get_logger
from core.rate_limiter import RATE_LIMITS, get_limiter
from quiz.engine.lifecycle import QuizLifecycleController
from records.database import StudentDatabase
from utils.validators import validate_message_text

router = APIRouter(prefix="/api", tags=["API"])
limiter = get_limiter()
logger = get_logger("api")


class MessageRequest(BaseModel):
    message: str = Field(..., description="Texto da mensagem")
    user_id: str = Field(default="web-user", alias="userId")


@router.post("/message")
@limiter.limit(RATE_LIMITS["api"])
async def test_message(
    request: Request,
    payload: MessageRequest,
    handler: MessageHandler = Depends(app_state.get_handler),
):
    """Mesmo fluxo do webhook, resposta no corpo HTTP."""
    try:
        text = validate_message_text(payload.message)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=e.message)

    try:
        handled = await handler.process(payload.user_id, text)
    except Exception as e:
        logger.exception(f"Erro na API de teste: {e}")
        return JSONResponse(status_code=500, content={"success": False, "error": str(e)})

    return {"success": True, "response": handled.reply, "intent": handled.intent.value}


@router.get("/health")
async def health_check(controller: QuizLifecycleController = Depends(app_state.get_controller)):
    return {
        "status": "ok",
        "message": "Mwalimu AI Backend is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "active_quizzes": await controller.active_sessions(),
    }


@router.get("/students")
async def list_students(database: StudentDatabase = Depends(app_state.get_database)):
    students = await asyncio.to_thread(database.all_students)
    return {
        "success": True,
        "students": [s.model_dump(by_alias=True) for s in students],
        "count": len(students),
    }
