from fastapi import FastAPI

from api.v1.chat import router as chat_router
from app.config import get_settings
from app.core.logging import configure_logging
from app.core.middleware import RequestContextMiddleware


def create_app() -> FastAPI:
    configure_logging()
    s = get_settings()
    app = FastAPI(title=s.app_name, version="0.1.0")
    app.add_middleware(RequestContextMiddleware)
    app.include_router(chat_router, prefix="/v1")

    @app.get("/healthz")
    async def healthz():
        s = get_settings()
        return {
            "ok": True,
            "llm_enabled": s.LLM_ENABLED,
            "llm_model": s.LLM_MODEL,
        }

    return app


app = create_app()
