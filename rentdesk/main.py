# rentdesk/main.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from .core.config import settings
from .core.errors import AppError, ErrorCode
from .core.logger import logger
from .api.v1.auth import router as auth_router
from .api.v1.users import router as users_router
from .api.v1.settings import router as settings_router
from .api.v1.contract_templates import router as contract_templates_router

app = FastAPI(title="Rentdesk API", version="1.0")


origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()] or ["*"]

# Cookies are only sent cross-origin with explicit origins, never with "*".
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "status": "error",
            "code": ErrorCode.VALIDATION_ERROR.value,
            "message": "Validation error",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(IntegrityError)
def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity violation", extra={"meta": {"path": request.url.path}})
    return JSONResponse(
        status_code=409,
        content={
            "status": "error",
            "code": ErrorCode.CONFLICT.value,
            "message": "Resource already exists",
        },
    )


@app.exception_handler(Exception)
def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        exc_info=exc,
        extra={"meta": {"path": request.url.path, "method": request.method}},
    )
    return JSONResponse(
        status_code=500,
        content={
            "status": "error",
            "code": ErrorCode.INTERNAL_ERROR.value,
            "message": "Internal server error",
        },
    )


@app.get("/health")
def health():
    return {"ok": True}


app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(settings_router, prefix=settings.API_PREFIX)
app.include_router(contract_templates_router, prefix=settings.API_PREFIX)
