"""Workflow transfer orchestration between a SOURCE and a TARGET instance."""

from __future__ import annotations

import asyncio
import logging
import signal
import time
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any, cast

from workflow_transfer.domain.errors import (
    ConnectivityError,
    FetchError,
    PluginNotFoundError,
    TransferStateError,
    TransferValidationError,
)
from workflow_transfer.domain.models import (
    ProcessedWorkflow,
    ReportFile,
    TransferOptions,
    TransferProgress,
    TransferSummary,
    ValidateOptions,
    ValidationIssue,
    ValidationResult,
    ValidatorResult,
    WorkflowIssues,
    WorkflowRecord,
)
from workflow_transfer.domain.ports import WorkflowApi
from workflow_transfer.domain.transfer_types import (
    IssueSeverity,
    PluginType,
    RecordStatus,
    TransferStatus,
    ValidationPhase,
    infer_report_format,
)
from workflow_transfer.domain.workflows import (
    filter_workflows,
    workflow_has_credentials,
    workflow_id,
    workflow_name,
    workflow_nodes,
    workflow_tag_names,
)
from workflow_transfer.plugins.base import (
    DeduplicatorPlugin,
    Plugin,
    ReporterPlugin,
    ValidatorPlugin,
)
from workflow_transfer.plugins.registry import PluginRegistry

_CANCEL_SIGNALS = (signal.SIGINT, signal.SIGTERM)
_SIMULATED_TARGET_ID = "simulated"
_DEFAULT_DUPLICATE_REASON = "Duplicate detected"
_CREDENTIALS_SKIP_REASON = "Workflow uses credentials (skip_credentials enabled)"

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _LoadedPlugins:
    deduplicator: DeduplicatorPlugin
    validators: tuple[ValidatorPlugin, ...]
    reporters: tuple[ReporterPlugin, ...]


@dataclass(slots=True, frozen=True)
class _ValidationOutcome:
    issues: tuple[ValidationIssue, ...]
    rejected: bool

    @property
    def error_messages(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == IssueSeverity.ERROR]


class TransferManager:
    """Run one workflow transfer, or standalone validations, between two instances.

    A manager is single-use: `transfer()` is accepted only while idle, and
    `reset()` returns a finished manager to idle.
    """

    def __init__(
        self,
        source: WorkflowApi,
        target: WorkflowApi,
        plugin_registry: PluginRegistry,
        *,
        install_signal_handlers: bool = True,
    ) -> None:
        self._source = source
        self._target = target
        self._plugin_registry = plugin_registry
        self._install_signal_handlers = install_signal_handlers

        self._progress = TransferProgress()
        self._cancel_requested = False
        self._summary: TransferSummary | None = None

    @property
    def status(self) -> TransferStatus:
        return self._progress.status

    @property
    def summary(self) -> TransferSummary | None:
        """Return the summary of the finished run, if any."""

        return self._summary

    def get_progress(self) -> TransferProgress:
        """Return an immutable progress snapshot."""

        return self._progress

    def cancel(self) -> bool:
        """Request cooperative cancellation; return False when nothing is running."""

        if self._progress.status != TransferStatus.RUNNING:
            return False
        if not self._cancel_requested:
            logger.warning("Transfer cancellation requested.")
        self._cancel_requested = True
        return True

    def reset(self) -> None:
        """Return a finished manager to idle so it can run again."""

        if self._progress.status == TransferStatus.RUNNING:
            raise TransferStateError("Cannot reset a running transfer.")
        self._progress = TransferProgress()
        self._cancel_requested = False
        self._summary = None

    async def transfer(
        self,
        options: TransferOptions | Mapping[str, Any] | None = None,
    ) -> TransferSummary:
        """Transfer SOURCE workflows to TARGET and return the run summary."""

        if self._progress.status != TransferStatus.IDLE:
            raise TransferStateError(
                f"Transfer manager is {self._progress.status}; call reset() before reuse."
            )
        try:
            parsed = TransferOptions.parse(options)
        except TransferValidationError:
            self._set_status(TransferStatus.FAILED)
            raise

        self._cancel_requested = False
        self._progress = TransferProgress(status=TransferStatus.RUNNING)
        start_time = datetime.now(UTC)
        started = time.monotonic()
        logger.info(
            "Starting transfer %s -> %s (dry_run=%s, parallelism=%d).",
            self._source.base_url,
            self._target.base_url,
            parsed.dry_run,
            parsed.parallelism,
        )

        try:
            await self._check_connectivity(("SOURCE", self._source), ("TARGET", self._target))
            with self._signal_hooks():
                plugins = self._load_plugins(parsed)
                source_workflows = await self._fetch_workflows("SOURCE", self._source)
                target_workflows = await self._fetch_workflows("TARGET", self._target)
                selected = filter_workflows(source_workflows, parsed.filters)
                logger.info(
                    "Selected %d of %d SOURCE workflows; TARGET has %d.",
                    len(selected),
                    len(source_workflows),
                    len(target_workflows),
                )
                self._progress = replace(self._progress, total=len(selected))
                processed = await self._process_workflows(
                    selected,
                    target_workflows,
                    plugins,
                    parsed,
                )
        except asyncio.CancelledError:
            self._set_status(TransferStatus.CANCELLED)
            raise
        except Exception:
            self._set_status(TransferStatus.FAILED)
            raise

        cancelled = bool(selected) and self._cancel_requested
        summary = self._build_summary(
            processed,
            total=len(selected),
            start_time=start_time,
            duration_ms=int((time.monotonic() - started) * 1000),
            dry_run=parsed.dry_run,
            cancelled=cancelled,
        )
        if selected:
            reports = await self._generate_reports(plugins.reporters, summary)
            summary = summary.model_copy(update={"reports": tuple(reports)})
        else:
            logger.info("No workflows matched the filters; nothing to transfer.")

        self._summary = summary
        self._set_status(TransferStatus.CANCELLED if cancelled else TransferStatus.COMPLETED)
        logger.info(
            "Transfer %s: %d transferred, %d skipped, %d failed of %d in %d ms.",
            self._progress.status,
            summary.transferred,
            summary.skipped,
            summary.failed,
            summary.total,
            summary.duration_ms,
        )
        return summary

    async def validate(
        self,
        options: ValidateOptions | Mapping[str, Any] | None = None,
    ) -> ValidationResult:
        """Validate SOURCE workflows without touching TARGET."""

        if self._progress.status == TransferStatus.RUNNING:
            raise TransferStateError("Cannot validate while a transfer is running.")
        parsed = ValidateOptions.parse(options)

        await self._check_connectivity(("SOURCE", self._source))
        validators = self._resolve_validators(parsed.validators)
        if not validators:
            raise PluginNotFoundError(
                PluginType.VALIDATOR.value,
                ", ".join(parsed.validators) or "<none>",
            )

        source_workflows = await self._fetch_workflows("SOURCE", self._source)
        selected = filter_workflows(source_workflows, parsed.filters)

        issues: list[WorkflowIssues] = []
        errors = 0
        warnings = 0
        for record in selected:
            outcome = self._run_validators(record, validators, ValidationPhase.STANDALONE)
            if not outcome.issues:
                continue
            issues.append(
                WorkflowIssues(
                    workflow=workflow_name(record) or "<unnamed>",
                    workflow_id=workflow_id(record),
                    issues=outcome.issues,
                )
            )
            for issue in outcome.issues:
                if issue.severity == IssueSeverity.ERROR:
                    errors += 1
                else:
                    warnings += 1

        result = ValidationResult(
            total=len(selected),
            valid=len(selected) - len(issues),
            invalid=len(issues),
            errors=errors,
            warnings=warnings,
            validators=tuple(validator.name for validator in validators),
            issues=tuple(issues),
        )
        logger.info(
            "Validated %d workflows: %d valid, %d invalid (%d errors, %d warnings).",
            result.total,
            result.valid,
            result.invalid,
            result.errors,
            result.warnings,
        )
        return result

    async def _check_connectivity(self, *instances: tuple[str, WorkflowApi]) -> None:
        for label, api in instances:
            try:
                check = await api.test_connection()
            except Exception as exc:
                raise ConnectivityError(label, str(exc)) from exc
            if not check.success:
                raise ConnectivityError(label, check.error or "unknown error", check.suggestion)
            logger.info("%s connection OK (%s).", label, api.base_url)

    async def _fetch_workflows(self, label: str, api: WorkflowApi) -> list[WorkflowRecord]:
        try:
            return await api.get_workflows()
        except Exception as exc:
            raise FetchError(f"Workflow fetching failed: {label}: {exc}") from exc

    def _load_plugins(self, options: TransferOptions) -> _LoadedPlugins:
        deduplicator = self._plugin_registry.get(options.deduplicator, PluginType.DEDUPLICATOR)
        if deduplicator is None:
            raise PluginNotFoundError(PluginType.DEDUPLICATOR.value, options.deduplicator)
        self._ensure_enabled(deduplicator)

        validators = self._resolve_validators(options.validators)
        if not validators:
            logger.warning("No validators loaded; workflows will not be validated.")

        reporters: list[ReporterPlugin] = []
        for name in options.reporters:
            reporter = self._plugin_registry.get(name, PluginType.REPORTER)
            if reporter is None:
                logger.warning("Reporter plugin not found: %s (skipped).", name)
                continue
            self._ensure_enabled(reporter)
            reporters.append(cast(ReporterPlugin, reporter))
        if not reporters:
            logger.warning("No reporters loaded; no reports will be generated.")

        return _LoadedPlugins(
            deduplicator=cast(DeduplicatorPlugin, deduplicator),
            validators=tuple(validators),
            reporters=tuple(reporters),
        )

    def _resolve_validators(self, names: Sequence[str]) -> list[ValidatorPlugin]:
        validators: list[ValidatorPlugin] = []
        for name in names:
            validator = self._plugin_registry.get(name, PluginType.VALIDATOR)
            if validator is None:
                logger.warning("Validator plugin not found: %s (skipped).", name)
                continue
            self._ensure_enabled(validator)
            validators.append(cast(ValidatorPlugin, validator))
        return validators

    def _ensure_enabled(self, plugin: Plugin) -> None:
        if not plugin.enabled:
            logger.warning("Plugin %s is disabled; enabling it for this run.", plugin.name)
            plugin.enable()

    async def _process_workflows(
        self,
        records: Sequence[WorkflowRecord],
        target_workflows: Sequence[WorkflowRecord],
        plugins: _LoadedPlugins,
        options: TransferOptions,
    ) -> list[ProcessedWorkflow]:
        results: list[ProcessedWorkflow | None] = [None] * len(records)
        slots = asyncio.Semaphore(options.parallelism)
        tasks: list[asyncio.Task[None]] = []

        async def run(position: int, record: WorkflowRecord) -> None:
            try:
                outcome = await self._process_workflow(record, target_workflows, plugins, options)
                results[position] = outcome
                self._record_outcome(outcome)
            finally:
                slots.release()

        try:
            for position, record in enumerate(records):
                if self._cancel_requested:
                    self._log_cancelled(len(records) - position)
                    break
                await slots.acquire()
                if self._cancel_requested:
                    slots.release()
                    self._log_cancelled(len(records) - position)
                    break
                tasks.append(
                    asyncio.create_task(run(position, record), name=f"transfer-workflow-{position}")
                )
            if tasks:
                await asyncio.gather(*tasks)
        finally:
            pending = [task for task in tasks if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        return [result for result in results if result is not None]

    async def _process_workflow(
        self,
        record: WorkflowRecord,
        target_workflows: Sequence[WorkflowRecord],
        plugins: _LoadedPlugins,
        options: TransferOptions,
    ) -> ProcessedWorkflow:
        name = workflow_name(record) or "<unnamed>"
        base: dict[str, Any] = {
            "name": name,
            "source_id": workflow_id(record),
            "tags": tuple(workflow_tag_names(record)),
            "node_count": len(workflow_nodes(record)),
        }

        # is_duplicate/get_reason must run without a suspension point in between.
        try:
            duplicate = plugins.deduplicator.is_duplicate(record, target_workflows)
            duplicate_reason = plugins.deduplicator.get_reason() if duplicate else None
        except Exception as exc:
            logger.warning("Deduplication failed for workflow %s: %s", name, exc)
            return ProcessedWorkflow(
                **base,
                status=RecordStatus.FAILED,
                error=f"Deduplication failed: {exc}",
            )
        if duplicate:
            logger.info("Skipping duplicate workflow %s.", name)
            return ProcessedWorkflow(
                **base,
                status=RecordStatus.SKIPPED,
                reason=duplicate_reason or _DEFAULT_DUPLICATE_REASON,
            )

        validation = self._run_validators(record, plugins.validators, ValidationPhase.PRE)
        if validation.rejected:
            logger.info("Skipping workflow %s after failed validation.", name)
            return ProcessedWorkflow(
                **base,
                status=RecordStatus.SKIPPED,
                reason="Validation failed: " + "; ".join(validation.error_messages),
            )

        if options.skip_credentials and workflow_has_credentials(record):
            logger.info("Skipping workflow %s because it uses credentials.", name)
            return ProcessedWorkflow(
                **base,
                status=RecordStatus.SKIPPED,
                reason=_CREDENTIALS_SKIP_REASON,
            )

        if options.dry_run:
            return ProcessedWorkflow(
                **base,
                status=RecordStatus.TRANSFERRED,
                target_id=_SIMULATED_TARGET_ID,
                simulated=True,
            )

        try:
            created = await self._target.create_workflow(record)
        except Exception as exc:
            logger.warning("Failed to transfer workflow %s: %s", name, exc)
            return ProcessedWorkflow(**base, status=RecordStatus.FAILED, error=str(exc))

        target_id = workflow_id(created) if isinstance(created, Mapping) else None
        logger.info("Transferred workflow %s (target id %s).", name, target_id)
        return ProcessedWorkflow(**base, status=RecordStatus.TRANSFERRED, target_id=target_id)

    def _run_validators(
        self,
        record: WorkflowRecord,
        validators: Sequence[ValidatorPlugin],
        phase: ValidationPhase,
    ) -> _ValidationOutcome:
        issues: list[ValidationIssue] = []
        rejected = False
        for validator in validators:
            try:
                result = _coerce_validator_result(validator.validate(record))
            except Exception as exc:
                logger.warning("Validator %s raised: %s", validator.name, exc)
                issues.append(
                    ValidationIssue(
                        validator=validator.name,
                        severity=IssueSeverity.ERROR,
                        message=f"Validator error: {exc}",
                        phase=phase,
                    )
                )
                rejected = True
                continue

            errors = list(result.errors)
            if not result.valid:
                rejected = True
                if not errors:
                    errors.append(f"{validator.name} reported the workflow as invalid")
            issues.extend(
                ValidationIssue(
                    validator=validator.name,
                    severity=IssueSeverity.ERROR,
                    message=message,
                    phase=phase,
                )
                for message in errors
            )
            issues.extend(
                ValidationIssue(
                    validator=validator.name,
                    severity=IssueSeverity.WARNING,
                    message=message,
                    phase=phase,
                )
                for message in result.warnings
            )
        return _ValidationOutcome(issues=tuple(issues), rejected=rejected)

    def _record_outcome(self, outcome: ProcessedWorkflow) -> None:
        progress = self._progress
        self._progress = replace(
            progress,
            processed=progress.processed + 1,
            transferred=progress.transferred + (outcome.status == RecordStatus.TRANSFERRED),
            skipped=progress.skipped + (outcome.status == RecordStatus.SKIPPED),
            failed=progress.failed + (outcome.status == RecordStatus.FAILED),
        )

    def _build_summary(
        self,
        processed: Sequence[ProcessedWorkflow],
        *,
        total: int,
        start_time: datetime,
        duration_ms: int,
        dry_run: bool,
        cancelled: bool,
    ) -> TransferSummary:
        counts = {status: 0 for status in RecordStatus}
        for workflow in processed:
            counts[workflow.status] += 1
        return TransferSummary(
            total=total,
            transferred=counts[RecordStatus.TRANSFERRED],
            skipped=counts[RecordStatus.SKIPPED],
            failed=counts[RecordStatus.FAILED],
            processed=len(processed),
            workflows=tuple(processed),
            duration_ms=duration_ms,
            start_time=start_time,
            end_time=datetime.now(UTC),
            dry_run=dry_run,
            cancelled=cancelled,
            source_url=self._source.base_url,
            target_url=self._target.base_url,
        )

    async def _generate_reports(
        self,
        reporters: Sequence[ReporterPlugin],
        summary: TransferSummary,
    ) -> list[ReportFile]:
        reports: list[ReportFile] = []
        for reporter in reporters:
            try:
                path = await asyncio.to_thread(reporter.generate, summary)
            except Exception:
                logger.exception("Reporter %s failed.", reporter.name)
                continue
            reports.append(
                ReportFile(
                    reporter=reporter.name,
                    path=str(path),
                    format=infer_report_format(reporter.name),
                )
            )
        return reports

    def _log_cancelled(self, remaining: int) -> None:
        logger.warning("Transfer cancelled; %d workflow(s) not processed.", remaining)

    def _set_status(self, status: TransferStatus) -> None:
        self._progress = replace(self._progress, status=status)

    @contextmanager
    def _signal_hooks(self) -> Iterator[None]:
        installed: list[signal.Signals] = []
        loop = asyncio.get_running_loop()
        if self._install_signal_handlers:
            for signum in _CANCEL_SIGNALS:
                try:
                    loop.add_signal_handler(signum, self._on_signal, signum)
                except (NotImplementedError, RuntimeError, ValueError) as exc:
                    logger.debug("Cannot install %s handler: %s", signum.name, exc)
                    continue
                installed.append(signum)
        try:
            yield
        finally:
            for signum in installed:
                loop.remove_signal_handler(signum)

    def _on_signal(self, signum: signal.Signals) -> None:
        logger.warning("Received %s; finishing in-flight workflows.", signum.name)
        self.cancel()


def _coerce_validator_result(result: object) -> ValidatorResult:
    if isinstance(result, ValidatorResult):
        return result
    if isinstance(result, Mapping):
        return ValidatorResult(
            valid=bool(result.get("valid")),
            errors=tuple(str(message) for message in result.get("errors") or ()),
            warnings=tuple(str(message) for message in result.get("warnings") or ()),
        )
    raise TypeError(f"Validator returned {type(result).__name__}, expected ValidatorResult.")


__all__ = ["TransferManager"]
