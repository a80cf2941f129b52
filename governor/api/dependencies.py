"""Dependency injection for API routes.

Stores are created once per process from `settings.storage.backend` and
shared across requests. Every dependency can be overridden in tests via
`app.dependency_overrides`.
"""

from typing import Annotated

from fastapi import Depends

from governor.api.exceptions import StoreUnavailableError
from governor.audit.logger import AuditLogger
from governor.audit.store import AuditSink
from governor.audit.stores.inmemory import InMemoryAuditSink
from governor.audit.stores.postgres import PostgresAuditSink
from governor.config import get_settings as _load_settings
from governor.config.settings import Settings
from governor.db.pool import PostgresPool
from governor.dispatch.dispatcher import TaskDispatcher
from governor.dispatch.executor import HttpTaskExecutor
from governor.guardrails.evaluator import GuardrailEvaluator
from governor.guardrails.limits import HardLimitChecker
from governor.guardrails.store import TrustConfigStore
from governor.guardrails.stores.inmemory import InMemoryTrustConfigStore
from governor.guardrails.stores.postgres import PostgresTrustConfigStore
from governor.observability.logging import get_logger
from governor.schedule.milestones import MilestoneScheduler
from governor.schedule.store import MilestoneStore
from governor.schedule.stores.inmemory import InMemoryMilestoneStore
from governor.schedule.stores.postgres import PostgresMilestoneStore
from governor.tasks.store import TaskStore
from governor.tasks.stores.inmemory import InMemoryTaskStore
from governor.tasks.stores.postgres import PostgresTaskStore

logger = get_logger(__name__)

# Shared connection pool
_postgres_pool: PostgresPool | None = None

# Store and service instances - created once and reused
_task_store: TaskStore | None = None
_trust_config_store: TrustConfigStore | None = None
_audit_sink: AuditSink | None = None
_milestone_store: MilestoneStore | None = None
_audit_logger: AuditLogger | None = None
_executor: HttpTaskExecutor | None = None
_dispatcher: TaskDispatcher | None = None


def get_settings() -> Settings:
    """Get application settings (cached by governor.config)."""
    return _load_settings()


def _uses_postgres(settings: Settings) -> bool:
    return settings.storage.backend == "postgres"


async def get_postgres_pool() -> PostgresPool:
    """Get the shared PostgreSQL connection pool.

    Creates and connects the pool on first access.

    Raises:
        StoreUnavailableError: If the database cannot be reached
    """
    global _postgres_pool
    if _postgres_pool is None:
        try:
            pool = PostgresPool.from_config(get_settings().storage.postgres)
            await pool.connect()
        except Exception as e:
            logger.error("postgres_pool_connect_failed", error=str(e))
            raise StoreUnavailableError("Database unavailable") from e
        _postgres_pool = pool
        logger.info("postgres_pool_connected")
    return _postgres_pool


async def get_task_store() -> TaskStore:
    """Get the TaskStore instance."""
    global _task_store
    if _task_store is None:
        settings = get_settings()
        if _uses_postgres(settings):
            _task_store = PostgresTaskStore(await get_postgres_pool())
        else:
            _task_store = InMemoryTaskStore()
        logger.info("task_store_initialized", store_type=settings.storage.backend)
    return _task_store


async def get_trust_config_store() -> TrustConfigStore:
    """Get the TrustConfigStore instance."""
    global _trust_config_store
    if _trust_config_store is None:
        settings = get_settings()
        if _uses_postgres(settings):
            _trust_config_store = PostgresTrustConfigStore(await get_postgres_pool())
        else:
            _trust_config_store = InMemoryTrustConfigStore()
        logger.info("trust_config_store_initialized", store_type=settings.storage.backend)
    return _trust_config_store


async def get_audit_sink() -> AuditSink:
    """Get the AuditSink instance."""
    global _audit_sink
    if _audit_sink is None:
        settings = get_settings()
        if _uses_postgres(settings):
            _audit_sink = PostgresAuditSink(await get_postgres_pool())
        else:
            _audit_sink = InMemoryAuditSink()
        logger.info("audit_sink_initialized", store_type=settings.storage.backend)
    return _audit_sink


async def get_milestone_store() -> MilestoneStore:
    """Get the MilestoneStore instance."""
    global _milestone_store
    if _milestone_store is None:
        settings = get_settings()
        if _uses_postgres(settings):
            _milestone_store = PostgresMilestoneStore(await get_postgres_pool())
        else:
            _milestone_store = InMemoryMilestoneStore()
        logger.info("milestone_store_initialized", store_type=settings.storage.backend)
    return _milestone_store


def get_audit_logger(
    sink: Annotated[AuditSink, Depends(get_audit_sink)],
) -> AuditLogger:
    """Get the shared best-effort AuditLogger."""
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger.from_config(sink, get_settings().audit)
        logger.info("audit_logger_initialized", enabled=_audit_logger.is_active)
    return _audit_logger


def get_guardrail_evaluator(
    audit_logger: Annotated[AuditLogger, Depends(get_audit_logger)],
) -> GuardrailEvaluator:
    """Get a GuardrailEvaluator bound to the shared audit logger."""
    return GuardrailEvaluator(
        audit_logger,
        tool_input_max_chars=get_settings().audit.tool_input_max_chars,
    )


def get_hard_limit_checker(
    task_store: Annotated[TaskStore, Depends(get_task_store)],
) -> HardLimitChecker:
    """Get a HardLimitChecker reading from the task store."""
    return HardLimitChecker(task_store)


def get_dispatcher(
    task_store: Annotated[TaskStore, Depends(get_task_store)],
) -> TaskDispatcher:
    """Get the shared TaskDispatcher."""
    global _executor, _dispatcher
    if _dispatcher is None:
        config = get_settings().dispatch
        _executor = HttpTaskExecutor.from_config(config)
        _dispatcher = TaskDispatcher(task_store, _executor, config)
        logger.info("dispatcher_initialized", executor_url=config.executor_url)
    return _dispatcher


def get_milestone_scheduler(
    milestone_store: Annotated[MilestoneStore, Depends(get_milestone_store)],
    task_store: Annotated[TaskStore, Depends(get_task_store)],
) -> MilestoneScheduler:
    """Get a MilestoneScheduler over the shared stores."""
    return MilestoneScheduler(milestone_store, task_store)


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
TaskStoreDep = Annotated[TaskStore, Depends(get_task_store)]
TrustConfigStoreDep = Annotated[TrustConfigStore, Depends(get_trust_config_store)]
AuditSinkDep = Annotated[AuditSink, Depends(get_audit_sink)]
AuditLoggerDep = Annotated[AuditLogger, Depends(get_audit_logger)]
GuardrailEvaluatorDep = Annotated[GuardrailEvaluator, Depends(get_guardrail_evaluator)]
HardLimitCheckerDep = Annotated[HardLimitChecker, Depends(get_hard_limit_checker)]
DispatcherDep = Annotated[TaskDispatcher, Depends(get_dispatcher)]
MilestoneSchedulerDep = Annotated[MilestoneScheduler, Depends(get_milestone_scheduler)]


async def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing to ensure fresh instances.
    Stops the audit logger and closes connections before resetting.
    """
    global _task_store, _trust_config_store, _audit_sink, _milestone_store
    global _audit_logger, _executor, _dispatcher, _postgres_pool

    if _audit_logger is not None:
        await _audit_logger.stop()
        _audit_logger = None

    if _executor is not None:
        await _executor.close()
        _executor = None

    if _postgres_pool is not None:
        await _postgres_pool.close()
        _postgres_pool = None

    _task_store = None
    _trust_config_store = None
    _audit_sink = None
    _milestone_store = None
    _dispatcher = None
