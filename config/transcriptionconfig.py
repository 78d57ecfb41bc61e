# config/transcriptionconfig.py
"""
Transcription Configuration
Speech-to-text settings for the Groq Whisper proxy.
"""
from pydantic import Field
from pydantic_settings import BaseSettings


class TranscriptionSettings(BaseSettings):
    """Configuration for audio transcription"""

    GROQ_API_KEY: str = Field(default="", env="GROQ_API_KEY")
    TRANSCRIPTION_MODEL: str = "whisper-large-v3-turbo"
    # Alternatives: "whisper-large-v3", "distil-whisper-large-v3-en"
    TRANSCRIPTION_LANGUAGE: str = "en"
    TRANSCRIPTION_PROMPT: str = (
        "Medical consultation with patient. Include medical terminology, SOAP notes format, "
        "symptoms, diagnosis, assessment, and treatment plan details."
    )
    MAX_AUDIO_BYTES: int = 25 * 1024 * 1024  # Groq upload limit

    class Config:
        env_file = ".env"
        extra = "ignore"


transcription_settings = TranscriptionSettings()
