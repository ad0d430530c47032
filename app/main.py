"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from strawberry.fastapi import GraphQLRouter

from app.api import health
from app.core.config import settings
from app.core.dependencies import get_graphql_context
from app.core.logging import setup_logging
from app.db.database import AsyncSessionLocal, init_db
from app.graphql.schema import schema
from app.services.catalog.seed import load_catalog_file, seed_catalog

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    await init_db()
    if settings.catalog_file:
        logger.info(f"[CATALOG] Seeding catalog from {settings.catalog_file}")
        async with AsyncSessionLocal() as session:
            await seed_catalog(session, load_catalog_file(settings.catalog_file))
    yield


app = FastAPI(
    title="Delivery Orders",
    description="Food delivery order lifecycle over GraphQL",
    version="0.1.0",
    lifespan=lifespan,
)

graphql_app = GraphQLRouter(schema, context_getter=get_graphql_context)

app.include_router(health.router, tags=["health"])
app.include_router(graphql_app, prefix="/graphql", tags=["graphql"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
