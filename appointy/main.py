import logging

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from appointy.core import config
from appointy.database import DatastoreClient, DatastoreError
from appointy.routes import user_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)

app = FastAPI(title='Appointy Users API')
app.state.datastore = None

if config.CORS_ALLOW_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

logger = logging.getLogger(__name__)

PUBLIC_ERROR_KEYS = ('type', 'loc', 'msg')


@app.on_event('startup')
def initialize_datastore() -> None:
    config.validate_runtime_config()
    try:
        datastore = DatastoreClient.connect(
            config.MONGODB_URI,
            config.MONGODB_DATABASE,
            config.MONGODB_USERS_COLLECTION,
            timeout=config.MONGODB_CONNECT_TIMEOUT_SECONDS,
        )
    except DatastoreError:
        logger.exception('Datastore initialization failed. Check MONGODB_URI and that MongoDB is running.')
        return

    try:
        datastore.ensure_indexes()
    except DatastoreError:
        logger.exception('Could not create datastore indexes. Check for duplicate user emails.')
        datastore.close()
        return
    app.state.datastore = datastore


@app.on_event('shutdown')
def close_datastore() -> None:
    datastore = app.state.datastore
    if datastore is not None:
        datastore.close()
        app.state.datastore = None


def public_validation_errors(errors) -> list[dict]:
    # Rejected input may carry the plaintext password.
    return [{key: value for key, value in error.items() if key in PUBLIC_ERROR_KEYS} for error in errors]


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'detail': jsonable_encoder(public_validation_errors(exc.errors()))},
    )


@app.get('/')
def root():
    datastore = app.state.datastore
    reachable = datastore is not None and datastore.ping(timeout=config.REQUEST_TIMEOUT_SECONDS)
    return {'status': 'Appointy Users API Running', 'datastore': 'up' if reachable else 'down'}


app.include_router(user_routes.router, prefix='/users')


if __name__ == '__main__':
    uvicorn.run('appointy.main:app', host=config.HOST, port=config.PORT, reload=config.DEBUG)
