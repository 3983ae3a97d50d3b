import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError

from assistant.api.routes import router
from assistant.config import ARCHITECTURE_STORE, CORS_ORIGINS, LOG_LEVEL
from assistant.logging import ROUTES, STORE, configure_logging, get_logger

configure_logging(LOG_LEVEL)
logger = get_logger(__name__)

app = FastAPI(
    title="Architecture Assistant",
    version="0.1.0",
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes AFTER middleware
app.include_router(router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are client errors in this API's 400 {"message"} shape
    logger.info("%s Rejected malformed request to %s", ROUTES, request.url.path)
    return JSONResponse(
        status_code=400,
        content={"message": f"Invalid request: {len(exc.errors())} malformed field(s)"},
    )


@app.on_event("startup")
def startup():
    if ARCHITECTURE_STORE != "sql":
        return

    from assistant.db.models import Base
    from assistant.db.session import engine

    retries = 5
    delay = 2

    for attempt in range(retries):
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("%s Database connected", STORE)
            return
        except OperationalError:
            logger.warning("%s Waiting for database... (%d/%d)", STORE, attempt + 1, retries)
            time.sleep(delay)

    # Do not crash the app; requests will surface the store error as 500
    logger.error("%s Database not ready, architecture store unavailable", STORE)
