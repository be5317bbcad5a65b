import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from core import db, settings
from pokemon import repository as pokemon_repository
from pokemon import router as pokemon_router
from seed import router as seed_router

logging.basicConfig(
    level=settings.log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Refuse to start on a bad environment, then open the client once per process.
    settings.validate()
    await db.init_client()
    try:
        await pokemon_repository.ensure_indexes()
        logger.info("Connected to MongoDB database %s", settings.mongodb_db_name())
        yield
    finally:
        await db.close_client()


app = FastAPI(lifespan=lifespan)

app.include_router(pokemon_router.router, prefix=settings.API_PREFIX, tags=["pokemon"])
app.include_router(seed_router.router, prefix=settings.API_PREFIX, tags=["seed"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "pokedex api"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.port())
