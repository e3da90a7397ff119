import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.requests import Request
from starlette.responses import JSONResponse

from pricetracker.api.coins import router as coins_router
from pricetracker.api.prices import router as prices_router
from pricetracker.api.schemas.errors import ErrorResponse
from pricetracker.container import Container
from pricetracker.domain.errors import PriceTrackerError

logger = logging.getLogger("pricetracker.api")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    app.state.container = container
    yield
    await container.http_client().close()
    engine = container.engine()
    await engine.dispose()


app = FastAPI(title="Price Tracker", version=VERSION, lifespan=lifespan)


@app.exception_handler(PriceTrackerError)
async def price_tracker_error_handler(request: Request, exc: PriceTrackerError):
    if exc.status_code >= 500:
        logger.warning("%s on %s %s: %s (%s)", type(exc).__name__, request.method, request.url.path, exc.message, exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    body = ErrorResponse(error="Invalid request", details=details)
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    body = ErrorResponse(error="Internal server error", details=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(prices_router)
app.include_router(coins_router)


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Crypto price API is running! Try /api/prices or /api/coins"


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": VERSION}


def run() -> None:
    """Console entry point: serve the API on the configured port."""
    import uvicorn

    from pricetracker.config import settings

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
