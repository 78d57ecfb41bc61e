# app/transcriptionsystem/groq_transcription_client.py
"""
Groq Transcription Client - Whisper speech-to-text on Groq LPU
Model: whisper-large-v3-turbo (configurable)
"""
import logging
import time
from typing import Dict, Optional

import groq
from groq import AsyncGroq

from config.transcriptionconfig import transcription_settings

logger = logging.getLogger(__name__)


class TranscriptionUnavailable(Exception):
    """Groq is not configured or the upstream call failed."""


class GroqTranscriptionClient:
    """Groq Whisper client, created on first use"""

    _instance = None
    _client: Optional[AsyncGroq] = None
    _client_key: Optional[str] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _lazy_load_client(self) -> AsyncGroq:
        api_key = transcription_settings.GROQ_API_KEY
        if not api_key:
            logger.error("❌ GROQ_API_KEY not configured")
            raise TranscriptionUnavailable("GROQ_API_KEY not configured in environment")

        # Rebuild when the key changed after a config reset
        if self._client is None or self._client_key != api_key:
            self._client = AsyncGroq(api_key=api_key)
            self._client_key = api_key
            logger.info(f"✅ Groq client initialized with model: {transcription_settings.TRANSCRIPTION_MODEL}")
        return self._client

    async def transcribe(self, audio: bytes, platform: str = "android") -> Dict:
        """
        Transcribe recorded audio with Groq Whisper.

        Args:
            audio: Raw audio bytes (m4a from the mobile app)
            platform: "ios" or "android", decides the upload content type

        Returns:
            dict: {"text", "success", "duration"} with duration in ms
        """
        client = self._lazy_load_client()
        start = time.perf_counter()

        content_type = "audio/x-m4a" if platform == "ios" else "audio/m4a"
        logger.info(f"📤 Sending {len(audio) / 1024:.2f} KB to Groq Whisper ({platform})...")

        try:
            result = await client.audio.transcriptions.create(
                file=("recording.m4a", audio, content_type),
                model=transcription_settings.TRANSCRIPTION_MODEL,
                language=transcription_settings.TRANSCRIPTION_LANGUAGE,
                prompt=transcription_settings.TRANSCRIPTION_PROMPT,
                response_format="json",
            )
        except groq.APIError as e:
            duration = int((time.perf_counter() - start) * 1000)
            logger.error(f"❌ Transcription failed after {duration}ms: {e}")
            raise TranscriptionUnavailable(f"Groq API failed: {e}") from e

        text = (getattr(result, "text", "") or "").strip()
        duration = int((time.perf_counter() - start) * 1000)

        logger.info("✅ Transcription completed successfully")
        logger.info(f"📝 Transcription length: {len(text)} characters")
        logger.info(f"⏱️  Total time: {duration}ms")

        return {"text": text, "success": True, "duration": duration}
