# bookinfo/core/errors.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BookinfoError(Exception):
    """Base for every error that maps onto an HTTP answer"""
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ClientInputError(BookinfoError):
    """Malformed path parameter or request body"""
    status_code = 400


class DownstreamUnavailable(BookinfoError):
    """Transport failure towards a dependency, or simulated unavailability"""
    status_code = 503


class DownstreamError(BookinfoError):
    """A dependency answered with a non-200 status"""
    def __init__(self, status_code: int, message: str = None):
        super().__init__(message or f"downstream answered HTTP {status_code}", status_code)


class StoreError(BookinfoError):
    """All ratings store failures"""
    status_code = 500


class RatingsNotFound(StoreError):
    status_code = 404


class StoreUnreachable(StoreError):
    status_code = 503


class StoreQueryError(StoreError):
    status_code = 500


class RatingsDecodeError(StoreError):
    status_code = 500


class Unimplemented(BookinfoError):
    """Operation not supported by the configured backend"""
    status_code = 501


class DetailsLookupError(BookinfoError):
    """External book metadata could not be fetched or mapped"""
    status_code = 500


class TopologyError(BookinfoError):
    """Service registry could not be built; fatal at startup"""


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(BookinfoError)
    async def bookinfo_error_handler(request: Request, exc: BookinfoError):
        log = logger.warning if exc.status_code < 500 else logger.error
        log("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
