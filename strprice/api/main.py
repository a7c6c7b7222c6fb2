from fastapi import FastAPI
from contextlib import asynccontextmanager

from .routes import router
from .. import __version__
from ..logging_setup import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="strprice",
        description="Holiday-anchored week mapping for vacation rental pricing",
        version=__version__,
        lifespan=lifespan
    )

    app.include_router(router)

    return app


app = create_app()
