import logging

from fastapi import FastAPI, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from healthcare_api.core import config
from healthcare_api.database import init_db
from healthcare_api.routes import (
    appointment_routes,
    auth_routes,
    availability_routes,
    feedback_routes,
    user_routes,
)
from healthcare_api.scheduling.errors import InvalidInput

logging.basicConfig(level=config.LOG_LEVEL)

app = FastAPI(title='Healthcare Scheduling API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'Healthcare API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(user_routes.router, prefix='/users')
app.include_router(appointment_routes.router, prefix='/appointments')
app.include_router(availability_routes.router, prefix='/availability')
app.include_router(feedback_routes.router, prefix='/feedback')


@app.exception_handler(RequestValidationError)
async def appointment_validation_exception_handler(request: Request, exc: RequestValidationError):
    # Malformed appointment bodies get the same literal 400 as an absent one.
    if request.method == 'POST' and request.url.path.rstrip('/') == '/appointments':
        logger.info('Rejected malformed appointment request: %s', exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={'detail': InvalidInput.default_message},
        )
    return await request_validation_exception_handler(request, exc)
