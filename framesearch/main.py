from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from framesearch.api.routes import search
from framesearch.config import settings
from framesearch.services.http_client import shared_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await shared_client.release()


app = FastAPI(
    title="FrameSearch",
    description="Web search filtered for results that render inside an iframe",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(search.router)
app.add_exception_handler(RequestValidationError, search.invalid_search_request)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "framesearch"}
