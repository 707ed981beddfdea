# FastAPI entrypoint
import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import auth, inspections, reports, users
from .config import settings
from .deps import get_inspection_service
from .errors import ConflictError, ExternalServiceError, FiscalizaError, InvalidDataError, NotFoundError
from .presentation import presentation_table
from .schemas import DashboardOut
from .services.dashboard import dashboard_summary
from .services.inspection_service import InspectionService

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Fiscaliza API", version="0.1.0")

# CORS configuration based on environment
allowed_origins = ["*"] if settings.ENVIRONMENT == "development" else settings.CORS_ORIGINS

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["*"],
)

# Domain errors -> HTTP status
_STATUS_FOR = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (InvalidDataError, 400),
    (ExternalServiceError, 502),
)


@app.exception_handler(FiscalizaError)
async def domain_exception_handler(request: Request, exc: FiscalizaError):
    status_code = next((code for kind, code in _STATUS_FOR if isinstance(exc, kind)), 500)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# Custom exception handlers to ensure JSON responses for API errors
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(exc.errors())}
    )


# API routes
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(inspections.router, prefix="/api/inspections", tags=["Inspections"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])


@app.get("/api/dashboard", response_model=DashboardOut)
async def dashboard(service: InspectionService = Depends(get_inspection_service)):
    return dashboard_summary(await service.list())


@app.get("/api/presentation")
def presentation():
    """Labels, icons and colors for every status and action."""
    return presentation_table()


@app.get("/health")
def health():
    return {"status": "ok", "store": settings.STORE_BACKEND}


def run():
    """Run the API with uvicorn; PORT picks the port."""
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    logger.info("Server starting on 0.0.0.0:%d (%s store)", port, settings.STORE_BACKEND)
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
