from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from biome_images import router as biome_images_router
from biomes import router as biomes_router
from comments import router as comments_router
from core import db, settings
from core.error_handlers import register_exception_handlers
from core.logging_config import get_logger, setup_logging
from posts import router as posts_router
from users import router as users_router

load_dotenv()
setup_logging(settings.log_level())

logger = get_logger("server")


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Biomas API", lifespan=lifespan)

_origins = settings.cors_origins()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(users_router.router, tags=["users"])
app.include_router(posts_router.router, tags=["posts"])
app.include_router(comments_router.router, tags=["comments"])
app.include_router(biomes_router.router, tags=["biomes"])
app.include_router(biome_images_router.router, tags=["biome images"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "API de Biomas Brasileiros"}


def main() -> None:
    logger.info("Starting server on port %d", settings.port())
    uvicorn.run("main:app", host=settings.host(), port=settings.port())


if __name__ == "__main__":
    main()
