# main.py
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import CORS_ORIGINS, ENVIRONMENT
from .errors import VotingError
from .routes.auth_routes import router as auth_router
from .routes.candidate_routes import router as candidate_router
from .routes.review_routes import router as review_router
from .routes.vote_routes import router as vote_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="GlobalVote - Online Voting API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(candidate_router)
app.include_router(vote_router)
app.include_router(review_router)


# --- Error handling ---

@app.exception_handler(VotingError)
async def voting_error_handler(request: Request, exc: VotingError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
    content = {"success": False, "message": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {".".join(str(p) for p in err["loc"]): err["msg"] for err in exc.errors()}
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request data", "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    message = "Internal server error"
    if ENVIRONMENT != "production":
        message = f"Internal server error: {exc}"
    return JSONResponse(status_code=500, content={"success": False, "message": message})


# --- General Endpoints ---

@app.get("/health", tags=["Root"])
def health_check():
    return {
        "success": True,
        "message": "Voting API is running",
        "database": "MongoDB",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/", tags=["Root"])
def read_root():
    return {"success": True, "message": "Welcome to the GlobalVote API"}


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)
