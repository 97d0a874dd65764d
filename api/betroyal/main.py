import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from betroyal.config import settings
from betroyal.db.database import async_session, init_db
from betroyal.errors import BetRoyalError, ValidationFailure
from betroyal.routes import admin, auth, games, transactions
from betroyal.services.bootstrap import ensure_admin, ensure_games

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup resources."""
    await init_db()
    if settings.seed_games:
        async with async_session() as db:
            await ensure_admin(db)
            await ensure_games(db)
            await db.commit()
    yield


app = FastAPI(
    title='BetRoyal API',
    description='Backend API for the BetRoyal casino',
    version='0.1.0',
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    max_age=settings.session_max_age,
    same_site='lax',
    https_only=settings.env == 'production',
)


@app.exception_handler(BetRoyalError)
async def domain_error_handler(request: Request, exc: BetRoyalError):
    body = {'message': exc.message}
    if isinstance(exc, ValidationFailure) and exc.errors:
        body['errors'] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=body)


# Path fragment -> what the rejected body describes
VALIDATION_SUBJECTS = [
    ('/game-result', 'game result'),
    ('/games', 'game'),
    ('/transactions', 'transaction'),
    ('/users', 'user'),
    ('/register', 'registration'),
    ('/login', 'login'),
]


def validation_message(path: str) -> str:
    for fragment, subject in VALIDATION_SUBJECTS:
        if fragment in path:
            return f'Invalid {subject} data'
    return 'Invalid request data'


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            'message': validation_message(request.url.path),
            'errors': jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f'{request.method} {request.url.path} failed: {exc}', exc_info=exc)
    return JSONResponse(status_code=500, content={'message': 'Internal server error'})


# Routes
app.include_router(auth.router, prefix='/api', tags=['auth'])
app.include_router(games.router, prefix='/api/games', tags=['games'])
app.include_router(transactions.router, prefix='/api', tags=['transactions'])
app.include_router(admin.router, prefix='/api/admin', tags=['admin'])


@app.get('/health')
async def health_check():
    """Health check endpoint."""
    return {'status': 'ok', 'service': 'betroyal-api'}
