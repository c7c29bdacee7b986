from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from api.deps import get_removal_breaker
from api.routes.artists import router as artists_router
from api.routes.background import router as background_router
from api.routes.draft import router as draft_router
from api.routes.entries import router as entries_router
from api.routes.themes import router as themes_router
from infrastructure.metrics import get_metrics_response

app = FastAPI(title="Diary Note Studio")

# Origins of the diary web client in local development (Vite on 5173, static
# preview build on 8080). localhost and 127.0.0.1 are distinct origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8080",
        "http://127.0.0.1:8080",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(draft_router)
app.include_router(entries_router)
app.include_router(themes_router)
app.include_router(artists_router)
app.include_router(background_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/health/remove-bg")
def remove_bg_health() -> dict:
    """Circuit breaker snapshot for the remove.bg dependency."""
    return get_removal_breaker().status()


@app.get("/metrics")
def metrics() -> Response:
    """Expose the diary_* counters and removal latency for scraping.

    The body is empty when prometheus_client is unavailable.
    """
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
