"""
Stub Travel Plan API - FastAPI app for dry-running load scenarios locally.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import PlanStore, router
from .config import settings


def create_app() -> FastAPI:
    """Build the stub app with a fresh in-memory store."""
    app = FastAPI(
        title="Travel Plan API (stub)",
        description="In-memory travel plan service with optimistic locking",
        version="1.0.0"
    )
    app.state.store = PlanStore()

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": details}
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content)

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "planload.main:app",
        host=settings.host,
        port=settings.port,
    )
