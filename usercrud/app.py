import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from usercrud.config import Settings, get_settings
from usercrud.crud.core import UserCRUD, default_route_templates
from usercrud.observability import setup_logging
from usercrud.resource_manager.basic import IUserRepository, ResourceIDNotFoundError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ResourceIDNotFoundError)
    async def resource_not_found_handler(request: Request, exc: ResourceIDNotFoundError):
        logger.info(str(exc), extra={"path": request.url.path})
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        return JSONResponse(
            status_code=500, content={"detail": "An unexpected error occurred"}
        )


def create_app(
    settings: Settings | None = None,
    repository: IUserRepository | None = None,
) -> FastAPI:
    """建立 FastAPI 應用

    Args:
        settings: 應用設定，未提供時使用 `get_settings()`
        repository: 使用者儲存，未提供時建立新的 MemoryUserRepository
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)

    crud = UserCRUD(repository)
    for template in default_route_templates(settings.default_page_size):
        crud.add_route_template(template)

    app = FastAPI(title=settings.title)
    app.state.crud = crud
    app.include_router(crud.apply(APIRouter()), prefix=settings.api_prefix)
    register_error_handlers(app)
    return app
