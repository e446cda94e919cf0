import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

# Configure root logger to show INFO for our application modules
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
# Suppress noisy third-party loggers
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("multipart").setLevel(logging.WARNING)

from pinvent.core.config import settings
from pinvent.core.database import engine, Base
from pinvent.core.errors import PinventError
from pinvent.api import health, users, products, contact

# Import all models so Base.metadata knows about them
from pinvent.models import user, password_reset, product  # noqa: F401

logger = logging.getLogger(__name__)

# Ensure data directories exist
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
if settings.DATABASE_URL.startswith("sqlite:///"):
    Path(settings.DATABASE_URL[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)

# Create all tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
)

# CORS: the session cookie is cross-site, so credentials must be allowed
_cors_origins = [settings.FRONTEND_URL]
if settings.DEBUG:
    _cors_origins += ["http://localhost:3000", "http://127.0.0.1:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PinventError)
async def pinvent_error_handler(request: Request, exc: PinventError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Routes
app.include_router(health.router)
app.include_router(users.router)
app.include_router(products.router)
app.include_router(contact.router)

app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/", response_class=PlainTextResponse)
def homepage():
    return f"{settings.APP_NAME} Homepage"
