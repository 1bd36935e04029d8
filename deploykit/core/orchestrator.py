"""Release Orchestrator.

Sequences one deployment of a git reference to a target environment.
"""

from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

from deploykit.config import settings
from deploykit.core.events import EventBus
from deploykit.core.exceptions import UserAborted
from deploykit.core.leases import LeaseManager
from deploykit.models.deployment import (
    DeploymentRequest,
    DeploymentRun,
    DeploymentStatus,
    PhaseStatus,
)
from deploykit.models.environment import PRODUCTION, SiteAliases
from deploykit.services.acquia import AcquiaClient
from deploykit.services.backups import BackupLocator
from deploykit.services.newrelic import NewRelicNotifier
from deploykit.services.notifications import NotificationWaiter
from deploykit.services.remote import RemoteShell
from deploykit.steps.database_refresh import DatabaseRefreshStep
from deploykit.steps.maintenance import MaintenanceMode
from deploykit.steps.runtime_version import RuntimeVersionStep
from deploykit.steps.selective_purge import SelectivePurgeStep
from deploykit.utils.logging import get_logger
from deploykit.utils.timing import eastern_timestamp

T = TypeVar("T")

PROD_CONFIRMATION = "This is a Production deployment. Are you damn sure?"


class ReleaseOrchestrator:
    """Runs the deployment phases in order.

    Phases:
    1. confirm - operator confirmation (prod only)
    2. db_refresh - copy prod database (non-prod, --refresh-db)
    3. maint_on - enable maintenance mode (unless --skip-maint)
    4. version_set - align the PHP version
    5. code_switch - switch code and wait for the cloud task
    6. post_deploy - ``drush deploy``
    7. purge - enqueue selective purges
    8. cache_rebuild - extra cache rebuild (--cache-rebuild)
    9. maint_off - restore maintenance mode
    10. notify_external - New Relic marker (prod only)
    11. purge_queue - process the purge queue

    Any failing phase aborts the run. Maintenance mode and the temporary
    database dump are restored/removed on the way out; nothing else is
    rolled back.
    """

    def __init__(
        self,
        acquia: AcquiaClient,
        shell: RemoteShell,
        aliases: SiteAliases,
        waiter: NotificationWaiter | None = None,
        events: EventBus | None = None,
        leases: LeaseManager | None = None,
        notifier: NewRelicNotifier | None = None,
        confirm: Callable[[str], bool] | None = None,
        php_version: str | None = None,
    ):
        self.acquia = acquia
        self.shell = shell
        self.aliases = aliases
        self.waiter = waiter or NotificationWaiter(acquia)
        self.events = events or EventBus()
        self.leases = leases or LeaseManager()
        self.notifier = notifier or NewRelicNotifier()
        self.confirm = confirm
        self.logger = get_logger("orchestrator")

        # Initialize steps
        self.runtime_step = RuntimeVersionStep(acquia, self.waiter, php_version or settings.php_version)
        self.purge_step = SelectivePurgeStep(shell)
        self.maintenance = MaintenanceMode(shell)

    def close(self) -> None:
        """Release the cloud API connection."""
        self.acquia.close()

    def __enter__(self) -> "ReleaseOrchestrator":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def run(self, request: DeploymentRequest) -> DeploymentRun:
        """Run the complete deployment.

        Raises:
            UserAborted: Production deploy was not confirmed.
            DeployKitError: Any phase failed.
        """
        run = DeploymentRun(request=request)
        target = request.target

        if request.is_production:
            self._confirm_production(run)

        with self.leases.hold(target.name, holder=str(run.id)):
            run.status = DeploymentStatus.RUNNING
            self.logger.info(
                "orchestrator.deployment.started",
                run_id=str(run.id),
                target=target.name,
                revision=request.git_ref,
                time=eastern_timestamp(),
            )

            try:
                self._run_phases(run)
            except Exception as e:
                run.status = DeploymentStatus.FAILED
                if run.error is None:
                    run.error = str(e)
                self.logger.error(
                    "orchestrator.deployment.failed",
                    run_id=str(run.id),
                    target=target.name,
                    phase=run.error_phase,
                    error=str(e),
                )
                self.events.publish_error(run.id, str(e), run.error_phase or run.current_phase)
                raise

        return run

    def _confirm_production(self, run: DeploymentRun) -> None:
        """Ask before touching production; nothing has been called yet."""
        phase = "confirm"
        run.update_phase(phase, PhaseStatus.IN_PROGRESS)
        confirmed = bool(self.confirm and self.confirm(PROD_CONFIRMATION))
        if not confirmed:
            run.update_phase(phase, PhaseStatus.FAILED, error="declined")
            run.status = DeploymentStatus.ABORTED
            self.logger.warning("orchestrator.deployment.aborted", target=run.request.target.name)
            raise UserAborted()
        run.update_phase(phase, PhaseStatus.COMPLETED)

    def _run_phases(self, run: DeploymentRun) -> None:
        request = run.request
        target = request.target
        options = request.options

        # The production database is only ever a source
        if not request.is_production and options.refresh_db:
            refresh_step = DatabaseRefreshStep(
                BackupLocator(self.acquia),
                self.shell,
                self.aliases.get(PRODUCTION),
            )
            self._phase(run, refresh_step.name, lambda: refresh_step.execute(request))
        else:
            self._skip(run, "db_refresh", "production" if request.is_production else "not requested")

        with self._maintenance_window(run):
            self._phase(run, self.runtime_step.name, lambda: self.runtime_step.execute(request))
            self._phase(run, "code_switch", lambda: self._switch_code(run))
            self._phase(
                run,
                "post_deploy",
                lambda: self.shell.drush(target, "deploy", options={"verbose": True}, stream=True),
            )
            self._phase(run, self.purge_step.name, lambda: self.purge_step.execute(request))

            if options.cache_rebuild:
                self._phase(run, "cache_rebuild", lambda: self.shell.drush(target, "cache:rebuild"))
            else:
                self._skip(run, "cache_rebuild", "not requested")

        if request.is_production:
            self._phase(
                run,
                "notify_external",
                lambda: {"recorded": self.notifier.record_deployment(request.git_ref)},
            )
        else:
            self._skip(run, "notify_external", "not production")

        run.status = DeploymentStatus.COMPLETED
        self.logger.info(
            "orchestrator.deployment.completed",
            run_id=str(run.id),
            target=target.name,
            time=eastern_timestamp(),
        )
        self.events.publish_deployment_complete(run.id, target.name, request.git_ref)

        self._phase(
            run,
            "purge_queue",
            lambda: self.shell.drush(target, "p:queue-work", options={"finish": True, "verbose": True}),
        )
        run.completed_at = run.phases["purge_queue"].completed_at

    def _switch_code(self, run: DeploymentRun) -> dict[str, Any]:
        task_id = self.acquia.switch_code(run.request.target.uuid, run.request.git_ref)
        notification = self.waiter.wait(task_id)
        return {"notification": task_id, "description": notification.description}

    @contextmanager
    def _maintenance_window(self, run: DeploymentRun) -> Iterator[None]:
        """Maintenance mode around the body, restored on success and failure."""
        target = run.request.target
        if run.request.options.skip_maintenance:
            self._skip(run, "maint_on", "skip-maint")
            yield
            self._skip(run, "maint_off", "skip-maint")
            return

        previous = self._phase(run, "maint_on", lambda: self.maintenance.enable(target))
        try:
            yield
        except BaseException:
            try:
                self._phase(run, "maint_off", lambda: self.maintenance.restore(target, previous))
            except Exception as restore_error:
                self.logger.error(
                    "orchestrator.maintenance.restore_failed",
                    target=target.name,
                    error=str(restore_error),
                )
            raise
        self._phase(run, "maint_off", lambda: self.maintenance.restore(target, previous))

    def _phase(self, run: DeploymentRun, phase: str, action: Callable[[], T]) -> T:
        """Run ``action`` as ``phase``, recording status and events."""
        run.update_phase(phase, PhaseStatus.IN_PROGRESS)
        self.events.publish_phase_started(run.id, phase)
        self.logger.info("orchestrator.phase.started", phase=phase, target=run.request.target.name)

        try:
            result = action()
        except Exception as e:
            run.update_phase(phase, PhaseStatus.FAILED, error=str(e))
            raise

        run.update_phase(phase, PhaseStatus.COMPLETED, metadata=result if isinstance(result, dict) else None)
        self.events.publish_phase_completed(run.id, phase, run.phases[phase].duration_ms or 0)
        return result

    def _skip(self, run: DeploymentRun, phase: str, reason: str) -> None:
        run.update_phase(phase, PhaseStatus.SKIPPED, metadata={"reason": reason})
        self.events.publish_phase_skipped(run.id, phase, reason)


def get_orchestrator(
    aliases: SiteAliases,
    confirm: Callable[[str], bool] | None = None,
    events: EventBus | None = None,
) -> ReleaseOrchestrator:
    """Build an orchestrator wired to the real services."""
    return ReleaseOrchestrator(
        acquia=AcquiaClient(),
        shell=RemoteShell(),
        aliases=aliases,
        events=events,
        confirm=confirm,
    )
