# app/transcriptionsystem/routes.py
import base64
import binascii
import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import Field

from app.shared.schemas import CamelModel
from app.transcriptionsystem.groq_transcription_client import (
    GroqTranscriptionClient,
    TranscriptionUnavailable,
)
from app.users.auth_dependencies import get_current_user
from config.transcriptionconfig import transcription_settings

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


class TranscriptionRequest(CamelModel):
    audio_base64: str = Field(..., min_length=1)
    platform: Literal["ios", "android", "web"] = "android"


class TranscriptionResponse(CamelModel):
    text: str
    success: bool
    duration: int


def get_transcription_client() -> GroqTranscriptionClient:
    return GroqTranscriptionClient()


def decode_audio(audio_base64: str) -> bytes:
    # Accept data URLs from the web client
    if audio_base64.startswith("data:") and "," in audio_base64:
        audio_base64 = audio_base64.split(",", 1)[1]

    try:
        audio = base64.b64decode(audio_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="audioBase64 is not valid base64")

    if not audio:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="audioBase64 is required")
    if len(audio) > transcription_settings.MAX_AUDIO_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Audio exceeds {transcription_settings.MAX_AUDIO_BYTES // (1024 * 1024)} MB limit",
        )
    return audio


@router.post("/transcribe", response_model=TranscriptionResponse)
async def transcribe(
    request: TranscriptionRequest,
    client: GroqTranscriptionClient = Depends(get_transcription_client),
):
    """Transcribe base64 audio to text using Groq Whisper."""
    logger.info(f"📥 Received transcription request (platform: {request.platform})")
    audio = decode_audio(request.audio_base64)
    logger.info(f"📊 Audio buffer size: {len(audio)} bytes")

    try:
        return await client.transcribe(audio, request.platform)
    except TranscriptionUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
