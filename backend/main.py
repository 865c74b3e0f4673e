from dotenv import load_dotenv

# Load environment variables before the config is read
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shirtsort import __version__
from shirtsort.api.v1 import analyzer, router as v1_router
from shirtsort.config import config
from shirtsort.schemas import HealthResponse
from shirtsort.utils.logging import get_logger

get_logger()

app = FastAPI(
    title="ShirtSort Backend",
    description="Group photos by the color of the shirt worn in each",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"]
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse(
        ok=True,
        version=__version__,
        service="shirtsort",
        classifier_available=analyzer.classifier.available
    )
