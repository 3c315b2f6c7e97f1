import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

from roadmap_api.config import get_settings
from roadmap_api.errors import MethodNotAllowedError, RoadmapError
from roadmap_api.routers import roadmap

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}

settings = get_settings()
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Environment check: has_api_key=%s, models=%s",
        settings.has_api_key,
        ", ".join(settings.gemini_models),
    )
    yield


app = FastAPI(
    title="Roadmap API",
    description="FastAPI backend that turns a learning goal into a Gemini-generated roadmap.",
    version="1.0.0",
    lifespan=lifespan,
)


@app.middleware("http")
async def apply_cors_headers(request: Request, call_next):
    # Preflight never reaches the routers
    if request.method == "OPTIONS":
        response = Response(status_code=200)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


@app.exception_handler(RoadmapError)
async def roadmap_error_handler(request: Request, exc: RoadmapError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    # Any method a route does not accept gets the roadmap error body
    if exc.status_code != 405:
        return await http_exception_handler(request, exc)
    error = MethodNotAllowedError()
    return JSONResponse(
        status_code=error.status_code,
        content=error.to_content(),
        headers={"Allow": "POST, OPTIONS"},
    )


app.include_router(roadmap.router, prefix="/api", tags=["Roadmap Generation"])


@app.get("/")
async def root():
    return {"message": "Roadmap API is running. POST a goal to /api/roadmap"}


# Local development runner
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("roadmap_api.main:app", host="127.0.0.1", port=8000, reload=True)
