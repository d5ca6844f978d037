from fastapi import FastAPI

from ratefeed.api.routes import router
from ratefeed.cache import ReadCache


def create_app(cache: ReadCache) -> FastAPI:
    app = FastAPI(title="ratefeed")
    app.state.cache = cache
    app.include_router(router)
    return app
