import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ai_client import GeminiClient
from config import settings
from db import SessionLocal
from store import ProblemStore

# Routers
from routers.health import router as health_router
from routers.page import router as page_router
from routers.problems import router as problems_router

logger = logging.getLogger("math-problem-generator")
logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title=f"{settings.PROJECT_NAME} API")

# Service handles used by the workflows; tests swap these via dependency_overrides
app.state.ai_client = GeminiClient()
app.state.store = ProblemStore(SessionLocal)

# Allow calls from a separate front-end dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def health_root():
    return {"ok": True}


app.include_router(page_router)  # /, /generate, /submit
app.include_router(problems_router)  # /api/...
app.include_router(health_router)  # /health/...

logger.info("%s ready (model=%s)", settings.PROJECT_NAME, settings.GEMINI_MODEL)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
