# app/main.py
from dotenv import load_dotenv

load_dotenv()

import asyncio
import logging.config
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.appconfig import settings

# Apply logging configuration
logging.config.dictConfig(settings.LOGGING_CONFIG)

from app.database.connection import AsyncSessionLocal, init_models
from app.shared.exception_handlers import register_exception_handlers
from app.shared.request_logging import log_requests

# Import routers
from app.users.auth_routers import router as auth_router
from app.users.user_routers import router as user_router
from app.system_services.patient_routes import router as patient_router
from app.system_services.soap_note_routes import router as soap_note_router
from app.icd10system.routes import router as icd10_router
from app.transcriptionsystem.routes import router as transcription_router

# Import background services and configurations
from app.icd10system.icd10_service import icd10_service
from app.icd10system.who_client import token_refresh_loop
from app.system_services.keep_alive import keep_alive_enabled, keep_alive_loop
from config.icd10config import icd10_settings
from config.transcriptionconfig import transcription_settings
from config.reset_config_route import router as reset_config_route

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    print("\n===============================================================================")
    print(f" 🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")
    print(f" ✅ ICD-10 min local results: {icd10_settings.MIN_LOCAL_RESULTS}")
    print(f" ✅ ICD-10 fuzzy search: {icd10_settings.ENABLE_FUZZY_SEARCH}")
    print(f" ✅ ICD-10 external search: {icd10_settings.ENABLE_EXTERNAL_SEARCH}")
    print(f" ✅ WHO credentials configured: {icd10_settings.has_credentials}")
    print(f" ✅ Transcription model: {transcription_settings.TRANSCRIPTION_MODEL}")
    print(f" 📚 Swagger docs: /api/docs")
    print("===============================================================================\n")

    # Create any missing tables
    await init_models()

    async with AsyncSessionLocal() as session:
        await icd10_service.check_pg_trgm(session)

    tasks = [asyncio.create_task(token_refresh_loop(icd10_service.who_client))]
    if keep_alive_enabled():
        tasks.append(asyncio.create_task(keep_alive_loop()))
    else:
        logger.info("ℹ️ Keep-alive disabled outside production")

    yield

    # Shutdown
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    print("👋 Shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    description="Clinical documentation API: SOAP notes, patients, ICD-10 lookup and transcription",
    version=settings.APP_VERSION,
    docs_url="/api/docs",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)
register_exception_handlers(app)

# Include routers with prefixes
app.include_router(auth_router, prefix="/auth", tags=["Authentication"])
app.include_router(user_router, prefix="/users", tags=["Users"])
app.include_router(patient_router, prefix="/patients", tags=["Patients"])
app.include_router(soap_note_router, prefix="/soap-notes", tags=["SOAP Notes"])
app.include_router(icd10_router, prefix="/icd10", tags=["ICD-10"])
app.include_router(transcription_router, prefix="/transcription", tags=["Transcription"])
app.include_router(reset_config_route, prefix="/system")


@app.get("/", tags=["Health"])
async def root():
    return {"status": "ok", "service": settings.APP_NAME, "version": settings.APP_VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
