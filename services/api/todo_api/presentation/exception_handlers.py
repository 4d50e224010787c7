import todo_api.common.exceptions as exc
import todo_api.presentation.schemas as schemas
from fastapi import Request, status
from fastapi.responses import JSONResponse
import datetime as dt
import logging

logger = logging.getLogger('app')

KIND_TO_STATUS: dict[exc.ErrorKind, int] = {
    exc.ErrorKind.INVALID_ARGUMENT: 422,
    exc.ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    exc.ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    exc.ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    exc.ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    exc.ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    exc.ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(request: Request, e: exc.AppBaseException) -> JSONResponse:
    status_code = KIND_TO_STATUS.get(e.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    body = schemas.ErrorResponse(
        message=e.message,
        kind=e.kind.value,
        path=request.url.path,
        timestamp=dt.datetime.now(dt.timezone.utc),
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(body.model_dump(mode='json'), status_code=status_code, headers=headers)


def register_exception_handlers(app):

    @app.exception_handler(exc.AppBaseException)
    async def app_exception_handler(request: Request, e: exc.AppBaseException):
        if e.kind == exc.ErrorKind.INTERNAL:
            logger.error(exc.format_exception_string(e, source='API', comment=f'{request.method} {request.url.path}'))
        else:
            logger.info(f'[API] {request.method} {request.url.path} -> {e.kind.value}: {e.message}')
        return error_response(request, e)
