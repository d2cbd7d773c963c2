"""Task review scheduler: process startup, wiring, timeout and the run loop.

No business logic here, only wiring of infrastructure (settings, logging,
telemetry, DB session, HTTP clients) around RunTaskReviewUseCase.
"""

from __future__ import annotations

import asyncio
from datetime import datetime

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from review_engine.application.dtos.task_review import TaskReviewRunResult
from review_engine.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from review_engine.application.services.recipient_resolver import RecipientResolver
from review_engine.application.use_cases.tasks.run_task_review import (
    RunTaskReviewUseCase,
)
from review_engine.core.config import Settings, get_settings
from review_engine.infrastructure.external.email import create_email_sender
from review_engine.infrastructure.external.notifications import (
    create_in_app_notifier,
)
from review_engine.infrastructure.persistence import database
from review_engine.infrastructure.persistence.repositories import (
    SqlUnsubscribeChecker,
    TaskReviewRepository,
)
from review_engine.infrastructure.services import TaskReviewTemplateRenderer
from review_engine.shared.telemetry.logging import get_logger, setup_logging
from review_engine.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    set_telemetry,
)
from review_engine.shared.utils.generators import generate_cuid

logger = get_logger(__name__)

MESSAGE_TIMED_OUT = "Task review run did not finish within its time budget"


def configure_runtime(settings: Settings | None = None) -> None:
    """Set up logging and, when enabled, OpenTelemetry. Call once per process."""
    settings = settings or get_settings()
    setup_logging()
    if settings.telemetry_enabled and get_telemetry() is None:
        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        logger.info("Telemetry initialized")


async def shutdown_runtime() -> None:
    """Flush telemetry and dispose the database engine."""
    telemetry = get_telemetry()
    if telemetry is not None:
        telemetry.shutdown()
    await database.dispose_engine()
    logger.info("Database engine disposed")


def build_use_case(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> RunTaskReviewUseCase:
    """Wire RunTaskReviewUseCase with SQL repositories and configured delivery backends."""
    dispatcher = NotificationDispatcher(
        email_sender=create_email_sender(settings, http_client=http_client),
        in_app_notifier=create_in_app_notifier(settings, http_client=http_client),
        renderer=TaskReviewTemplateRenderer(),
        app_url=settings.app_url,
        max_concurrency=settings.notification_max_concurrency,
    )
    return RunTaskReviewUseCase(
        task_repo=TaskReviewRepository(session),
        recipient_resolver=RecipientResolver(SqlUnsubscribeChecker(session_factory)),
        dispatcher=dispatcher,
    )


def _instrument_engine() -> None:
    telemetry = get_telemetry()
    if telemetry is not None and database.engine is not None:
        telemetry.instrument_sqlalchemy(database.engine)


async def run_task_review_once(
    now: datetime | None = None, settings: Settings | None = None
) -> TaskReviewRunResult:
    """Run one task review under the configured time budget.

    Returns:
        The use case result, or a failed result when the budget ran out.
        Writes already committed before the timeout are kept.

    Raises:
        SqlNotConfiguredException: DATABASE_URL is not set.
        Exception: Loading candidate tasks failed (fatal to the run).
    """
    settings = settings or get_settings()
    session_factory = database.get_session_factory()
    _instrument_engine()
    run_id = generate_cuid()
    timeout = settings.task_review_timeout_seconds

    async with (
        httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http_client,
        session_factory() as session,
    ):
        use_case = build_use_case(session, session_factory, settings, http_client)
        logger.info("[%s] Starting task review run", run_id)
        try:
            result = await asyncio.wait_for(
                use_case.run(now=now, run_id=run_id), timeout=timeout
            )
        except TimeoutError:
            logger.error(
                "[%s] Task review run timed out after %ss; remaining work is left "
                "for the next run",
                run_id,
                timeout,
            )
            return TaskReviewRunResult(
                run_id=run_id,
                success=False,
                total_tasks_checked=0,
                updated_to_todo=0,
                updated_to_failed=0,
                tasks_kept_done=0,
                message=MESSAGE_TIMED_OUT,
                error=f"timed out after {timeout}s",
            )

    if result.success:
        logger.info("[%s] Task review run finished: %s", run_id, result.message)
    else:
        logger.error(
            "[%s] Task review run failed: %s (%s)", run_id, result.message, result.error
        )
    return result


async def run_forever(
    interval_seconds: float | None = None, settings: Settings | None = None
) -> None:
    """Run the task review, then sleep the interval; repeat until cancelled.

    Runs never overlap: the next one starts only after the previous one
    returned. A run that raises is logged and the loop continues.
    """
    settings = settings or get_settings()
    interval = interval_seconds or settings.task_review_interval_seconds
    logger.info("Task review loop started (interval=%ss)", interval)
    while True:
        try:
            await run_task_review_once(settings=settings)
        except Exception:
            logger.exception("Task review run raised; retrying after the interval")
        await asyncio.sleep(interval)
