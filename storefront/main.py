# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy.exc import SQLAlchemyError

from storefront.version import VERSION
from storefront.api import routes_auth, routes_orders, routes_products, routes_users
from storefront.core.config import settings
from storefront.core.errors import StorefrontError, status_code_for
from storefront.core.logging import configure_logging
from storefront.db import session
from storefront.db.session import Base

logger = logging.getLogger("storefront.main")

# Create instrumentator first
instrumentator = Instrumentator()

app = FastAPI(title='Storefront API', version=VERSION)

# Instrument the app BEFORE adding routes or middleware
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/metrics",
    should_gzip=True,
)

@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code_for(exc),
        content={"message": str(exc), "error_type": type(exc).__name__},
    )

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )

@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "error_type": "InternalError"},
    )

# anything else that escapes a route; Starlette re-raises it to the server after responding
@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "error_type": "InternalError"},
    )

@app.get('/health')
def health(): return {'status': 'ok'}

@app.get('/v1/_info')
def info(): return {'service': 'storefront', 'version': VERSION}

@app.on_event("startup")
async def startup_event():
    configure_logging()
    if session.engine is None:
        session.init_engine()
    if settings.AUTO_CREATE_SCHEMA:
        import storefront.db.models  # noqa
        Base.metadata.create_all(bind=session.engine)
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            logger.debug("%s %s", sorted(route.methods), route.path)
    logger.info("storefront %s started", VERSION)

@app.on_event("shutdown")
async def shutdown_event():
    session.dispose_engine()
    logger.info("storefront stopped")

app.include_router(routes_auth.router, tags=['auth'])
app.include_router(routes_users.router, prefix='/users', tags=['users'])
app.include_router(routes_products.router, prefix='/products', tags=['products'])
app.include_router(routes_orders.router, prefix='/orders', tags=['orders'])
