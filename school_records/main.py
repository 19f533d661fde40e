import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from school_records.core import config
from school_records.core.exceptions import ServiceError, ValidationFailed
from school_records.routes import (
    attendance_routes,
    auth_routes,
    document_routes,
    mark_routes,
    policy_routes,
    routine_routes,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)

logger = logging.getLogger(__name__)

app = FastAPI(title='School Records API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def check_configuration() -> None:
    config.validate_runtime_config()
    logger.info('Storing collections under %s', config.DATA_DIR)


def error_response(error: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={'code': error.code, 'message': error.message},
    )


@app.exception_handler(ServiceError)
async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error('%s %s failed: %s', request.method, request.url.path, exc.message)
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get('msg', 'Invalid request') if errors else 'Invalid request'
    return error_response(ValidationFailed(message.removeprefix('Value error, ')))


@app.get('/')
def root():
    return {'status': 'School Records API Running'}


app.include_router(auth_routes.router, prefix='/auth')
app.include_router(attendance_routes.router, prefix='/attendance')
app.include_router(routine_routes.router, prefix='/routines')
app.include_router(document_routes.router, prefix='/documents')
app.include_router(policy_routes.router, prefix='/policies')
app.include_router(mark_routes.router, prefix='/marks')
