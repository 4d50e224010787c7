#Fastapi/Asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

#Project files
from todo_api.common.config import Config
import todo_api.infrastructure.telemetry.logs as logs
from todo_api.infrastructure.telemetry import setup_opentelemetry
from todo_api.infrastructure.dependencies import DatabaseManager, UnitOfWork, UserRepository, PasswordHasherType
from todo_api.presentation.exception_handlers import register_exception_handlers
import todo_api.presentation.routers as routers

#Misc
import datetime
import time

#Logging
import logging
import loguru # type: ignore


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f'[APP: Startup] {Config.SERVICE_NAME} {Config.APP_VERSION} ({Config.MODE}) starting')

    #Database
    await DatabaseManager.wait_for_startup(attempts=Config.DB_WAIT_MAX_RETRIES, interval_sec=Config.DB_WAIT_INTERVAL_SECONDS)
    await DatabaseManager.initialize_data_structures()

    #Bootstrap admin, temporary password until initialized
    async with DatabaseManager.session() as session:
        async with UnitOfWork(session) as uow:
            await UserRepository(uow).ensure_admin_exists(PasswordHasherType())

    logger.info(f'[APP: Startup] Startup finished!')
    yield
    await DatabaseManager.close()
    logger.info(f'[APP: Shutdown] Database connections closed')


logs.init_loggers()
logger = logging.getLogger('app')

app = FastAPI(
    title = f'{Config.SERVICE_NAME} commit {Config.GIT_COMMIT}',
    version = Config.APP_VERSION,
    description="Per-user todo lists with role-based user management. Authorize with a token from /auth/login.",
    swagger_ui_parameters={"persistAuthorization": True, "docExpansion": "list"},
    lifespan=lifespan,
    root_path=f"/{Config.APP_NAME}"
)

app.include_router(routers.HealthRouter)
app.include_router(routers.AuthRouter)
app.include_router(routers.UserRouter)
app.include_router(routers.TodoRouter)

register_exception_handlers(app)
setup_opentelemetry(app, engine=DatabaseManager.engine.sync_engine)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception as e:
        loguru.logger.exception(e)
        response = JSONResponse(
            status_code=500,
            content={
                'success': False,
                'message': 'Unhandled server error',
                'kind': 'internal',
                'path': request.url.path,
                'timestamp': datetime.datetime.now(datetime.timezone.utc).isoformat(),
            }
        )
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(f'[HTTP] {request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)')
    return response
