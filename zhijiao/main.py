import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

from zhijiao.core import config
from zhijiao.core.logging_config import setup_logging
from zhijiao.database import Base, engine, ensure_resource_schema
from zhijiao.models import resource, stat, user  # noqa: F401
from zhijiao.routes import auth_routes, chat_routes, resource_routes, stats_routes

setup_logging(config.LOG_LEVEL)
config.validate_runtime_config()

app = FastAPI(title='AI 语文智教 API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


def error_body(detail) -> dict:
    if isinstance(detail, dict) and 'error' in detail:
        return detail
    return {'error': detail}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [error.get('msg', '') for error in exc.errors()]
    # Unparseable bodies fall in the generic failure bucket, not input validation.
    if any(error.get('type') == 'json_invalid' for error in exc.errors()):
        logger.error('Malformed JSON body on %s %s', request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={'error': 'Malformed JSON body', 'details': '; '.join(messages)},
        )
    return JSONResponse(status_code=400, content={'error': 'Invalid input', 'details': messages})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(status_code=500, content={'error': 'Internal Server Error', 'details': str(exc)})


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_resource_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'AI 语文智教 API Running'}


app.include_router(auth_routes.router, prefix='/api/auth')
app.include_router(resource_routes.router, prefix='/api/resources')
app.include_router(stats_routes.router, prefix='/api/stats')
app.include_router(chat_routes.router, prefix='/api/chat')
