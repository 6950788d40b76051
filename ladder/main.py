import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ladder.auth import router as auth_router
from ladder.config import Settings
from ladder.database import Database
from ladder.errors import LadderError
from ladder.routers.matches import router as matches_router
from ladder.routers.players import router as players_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    # ✅ Initialize FastAPI app with redirect_slashes=False to avoid automatic redirects
    app = FastAPI(title="Ladder Records API", redirect_slashes=False)
    app.state.settings = settings
    app.state.db = Database(settings)

    app.add_middleware(TrustedHostMiddleware, allowed_hosts=list(settings.allowed_hosts))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ✅ Errors always come back as {message, error?}
    @app.exception_handler(LadderError)
    async def ladder_error_handler(request: Request, exc: LadderError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Server error", "error": str(exc)})

    # ✅ Health check
    @app.get("/")
    async def home():
        return {"message": "Ladder Records API is running!"}

    @app.on_event("startup")
    async def startup():
        if settings.auto_create_tables:
            await app.state.db.create_all()

    @app.on_event("shutdown")
    async def shutdown():
        await app.state.db.dispose()

    # ✅ Register routers
    app.include_router(auth_router, tags=["Auth"])
    app.include_router(matches_router, tags=["Matches"])
    app.include_router(players_router, tags=["Players"])

    return app


def run():
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        proxy_headers=True,
    )


if __name__ == "__main__":
    run()
