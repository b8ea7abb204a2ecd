# triage_intake/main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from triage_intake.api.routes import intake_error_handler, router as intake_router
from triage_intake.config import Settings, get_settings
from triage_intake.intake.catalog import Language
from triage_intake.intake.errors import IntakeError
from triage_intake.intake.summarizer import NarrativeSummarizer
from triage_intake.llm import OpenAILLMClient
from triage_intake.services import IntakeSessionService

logger = logging.getLogger(__name__)


def build_service(settings: Settings) -> IntakeSessionService:
    llm_client = None
    if settings.openai_api_key:
        llm_client = OpenAILLMClient(settings)
    else:
        logger.warning("OPENAI_API_KEY not set; narrative summaries will use the deterministic fallback")

    summarizer = NarrativeSummarizer(
        llm_client=llm_client,
        timeout_seconds=settings.summary_timeout_seconds,
        model=settings.llm_model,
    )
    return IntakeSessionService(
        summarizer=summarizer,
        emergency_number=settings.emergency_number,
        default_language=Language(settings.default_language),
    )


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[IntakeSessionService] = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Bilingual Triage Intake API", version="0.1.0")
    app.state.intake_service = service or build_service(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    app.add_exception_handler(IntakeError, intake_error_handler)

    @app.get("/")
    def root():
        return {"message": "Bilingual Triage Intake API is running"}

    app.include_router(intake_router, prefix="/api")
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("triage_intake.main:app", host="0.0.0.0", port=8000)
