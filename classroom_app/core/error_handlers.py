from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from .exceptions import ClassroomError, ValidationError

logger = logging.getLogger(__name__)

async def classroom_exception_handler(request: Request, exc: ClassroomError):
    """Handle custom classroom exceptions"""
    if exc.status_code >= 500:
        logger.error(f"Classroom error: {exc.message} - Path: {request.url.path}")
    else:
        logger.info(f"Request rejected ({exc.status_code}): {exc.message} - Path: {request.url.path}")

    content = {"error": exc.message, "type": exc.__class__.__name__}
    if isinstance(exc, ValidationError) and exc.field:
        content["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=content)

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.exception(f"Unexpected error: {str(exc)} - Path: {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": "InternalError"}
    )

def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ClassroomError, classroom_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
