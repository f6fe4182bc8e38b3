import logging
from typing import Any

import requests
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from zhijiao.core import config
from zhijiao.integrations import gemini

router = APIRouter(tags=['chat'])

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    message: Any = None


def validate_message(message: Any) -> str:
    if not isinstance(message, str) or not message.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Invalid input')

    if len(message) > config.CHAT_MAX_MESSAGE_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Message too long (max {config.CHAT_MAX_MESSAGE_LENGTH} chars)',
        )

    return message


@router.post('')
def chat(payload: ChatRequest):
    message = validate_message(payload.message)

    if not config.GEMINI_API_KEY:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail='Missing API Key')

    try:
        reply = gemini.generate_reply(message, config.GEMINI_API_KEY)
    except gemini.GeminiAPIError as exc:
        logger.error('Gemini responded with %s', exc.status_code)
        raise HTTPException(
            status_code=exc.status_code,
            detail={'error': str(exc), 'details': exc.body},
        ) from exc
    except (requests.RequestException, ValueError) as exc:
        logger.exception('Chat proxy failed')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={'error': 'Internal Server Error', 'details': str(exc)},
        ) from exc

    return {'reply': reply}
