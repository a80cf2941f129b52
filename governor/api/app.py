"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, route registration and the background lifecycle of
the audit logger and optional in-process jobs.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from governor import __version__
from governor.api import dependencies
from governor.api.exceptions import GovernorAPIError
from governor.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from governor.api.routes import register_routes
from governor.api.routes.health import get_metrics
from governor.jobs.runner import JobRunner
from governor.jobs.workflows.process_queue import ProcessQueueInput, ProcessTaskQueueWorkflow
from governor.jobs.workflows.scheduled_milestones import (
    ProcessScheduledMilestonesWorkflow,
    ScheduledMilestonesInput,
)
from governor.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def _build_job_runner() -> JobRunner:
    settings = dependencies.get_settings()
    task_store = await dependencies.get_task_store()
    dispatcher = dependencies.get_dispatcher(task_store)
    scheduler = dependencies.get_milestone_scheduler(
        await dependencies.get_milestone_store(), task_store
    )

    queue_workflow = ProcessTaskQueueWorkflow(dispatcher)
    milestone_workflow = ProcessScheduledMilestonesWorkflow(scheduler)

    runner = JobRunner()
    runner.register(
        ProcessTaskQueueWorkflow.WORKFLOW_NAME,
        settings.jobs.queue_interval_seconds,
        lambda: queue_workflow.run(ProcessQueueInput()),
    )
    runner.register(
        ProcessScheduledMilestonesWorkflow.WORKFLOW_NAME,
        settings.jobs.milestone_interval_seconds,
        lambda: milestone_workflow.run(ScheduledMilestonesInput()),
    )
    return runner


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the audit logger (and jobs, if enabled); drain them on shutdown."""
    settings = dependencies.get_settings()

    audit_logger = dependencies.get_audit_logger(await dependencies.get_audit_sink())
    await audit_logger.start()

    runner: JobRunner | None = None
    if settings.jobs.run_in_process:
        runner = await _build_job_runner()
        await runner.start()

    try:
        yield
    finally:
        if runner is not None:
            dependencies.get_dispatcher(await dependencies.get_task_store()).request_shutdown()
            await runner.stop()
        await dependencies.reset_dependencies()
        logger.info("app_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = dependencies.get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    app = FastAPI(
        title="Governor API",
        description="Trust-gated authorization, audit and dispatch for autonomous agents",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)
    register_routes(app)

    if settings.observability.metrics.enabled:
        app.add_api_route(
            settings.observability.metrics.path,
            get_metrics,
            methods=["GET"],
            tags=["Health"],
        )

    logger.info(
        "app_created",
        debug=settings.debug,
        storage_backend=settings.storage.backend,
        jobs_in_process=settings.jobs.run_in_process,
    )

    return app


def _validation_details(errors: list) -> list[ErrorDetail]:
    return [
        ErrorDetail(
            field=".".join(str(loc) for loc in error["loc"]),
            message=error["msg"],
        )
        for error in errors
    ]


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(GovernorAPIError)
    async def governor_api_error_handler(
        request: Request, exc: GovernorAPIError
    ) -> JSONResponse:
        """Handle GovernorAPIError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        response = ErrorResponse(error=ErrorBody(code=exc.error_code, message=exc.message))
        return JSONResponse(status_code=exc.status_code, content=response.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=_validation_details(exc.errors()),
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump())

    @app.exception_handler(ValidationError)
    async def pydantic_validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        logger.warning("pydantic_validation_error", errors=exc.errors(), path=request.url.path)
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Data validation failed",
                details=_validation_details(exc.errors()),
            )
        )
        return JSONResponse(status_code=400, content=response.model_dump())

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        response = ErrorResponse(
            error=ErrorBody(
                code=ErrorCode.INTERNAL_ERROR,
                message="An unexpected error occurred",
            )
        )
        return JSONResponse(status_code=500, content=response.model_dump())
