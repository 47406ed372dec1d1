"""BuildService — run a publish cycle over the content tree.

One cycle: parse every source file, validate each into a Document,
register them, resolve cross-references across the full registry, then
order and emit. Structural errors are collected across *all* files before
the cycle fails, so one report names every offending file. A failed cycle
emits nothing; the renderer sees either the full set or no set.

``check`` runs the same cycle without emitting; ``list_documents`` and
``show`` read from a checked cycle.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from pubctl.domain.content import ParsedSource
from pubctl.domain.errors import (
    AssetNotFoundError,
    BrokenLinkError,
    NotFoundError,
    PublishError,
    SourceReadError,
)
from pubctl.domain.lifecycle import CycleState, CycleTracker
from pubctl.domain.validation import validate_metadata
from pubctl.infrastructure.filesystem import read_source_file
from pubctl.infrastructure.registry import Registry
from pubctl.services.base import BaseService
from pubctl.services.publisher import Publisher, order_documents
from pubctl.services.resolver import LinkReport, enforce_link_policy, resolve_links
from pubctl.services.result import ServiceError, ServiceResult
from pubctl.services.telemetry import get_current_span, trace_span, traced

if TYPE_CHECKING:
    from pubctl.domain.document import Document
    from pubctl.infrastructure.site import Site

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class BuildReport(BaseModel):
    """Structured result of one publish cycle."""

    model_config = {"frozen": True}

    state: str
    history: list[str] = Field(default_factory=list)
    errors: list[dict[str, Any]] = Field(default_factory=list)
    warnings: list[dict[str, Any]] = Field(default_factory=list)
    broken_links: dict[str, list[str]] = Field(default_factory=dict)
    orphans: list[str] = Field(default_factory=list)
    sources: int = 0
    published: int = 0
    identifiers: list[str] = Field(default_factory=list)
    outputs: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state == CycleState.DONE


@dataclass(frozen=True)
class CycleOptions:
    """Per-run overrides of the configured build behavior."""

    strict_links: bool = False
    strict_assets: bool = False
    workers: int = 1
    emit: bool = True
    output_dir: Path | None = None


@dataclass
class CycleOutcome:
    """Everything a finished cycle produced. ``registry`` is None on failure."""

    report: BuildReport
    registry: Registry | None = None
    documents: tuple[Document, ...] = ()
    links: LinkReport | None = None
    errors: list[PublishError] = field(default_factory=list)
    warnings: list[PublishError] = field(default_factory=list)


class _CycleFailed(Exception):
    """Internal: unwinds the cycle once errors have been recorded."""


# ---------------------------------------------------------------------------
# PublishCycle
# ---------------------------------------------------------------------------


class PublishCycle:
    """A single, non-reusable run of the pipeline.

    Each instance owns a fresh :class:`Registry`; running a second cycle
    means constructing a second PublishCycle.
    """

    def __init__(self, site: Site, options: CycleOptions) -> None:
        self._site = site
        self._options = options
        self._tracker = CycleTracker()
        self._registry = Registry()
        self._errors: list[PublishError] = []
        self._warnings: list[PublishError] = []
        self._sources = 0
        self._ran = False

    @property
    def state(self) -> CycleState:
        return self._tracker.state

    def run(self) -> CycleOutcome:
        """Run every phase. Never raises for content problems.

        Anything unexpected still moves the cycle to ``failed`` before it
        propagates.
        """
        if self._ran:
            msg = "A PublishCycle can only run once; start a new cycle to rebuild"
            raise RuntimeError(msg)
        self._ran = True

        links: LinkReport | None = None
        documents: tuple[Document, ...] = ()
        outputs: list[str] = []
        try:
            with trace_span("parsing") as span:
                parsed = self._parse_all()
                if span:
                    span.annotate("sources", self._sources)

            self._advance(CycleState.VALIDATING)
            with trace_span("validating"):
                validated = self._validate_all(parsed)

            # Valid documents are still registered so duplicate identifiers
            # show up in the same report as field errors.
            self._advance(CycleState.REGISTERING)
            with trace_span("registering"):
                self._register_all(validated)
            self._raise_if_errors()
            self._registry.freeze()

            self._advance(CycleState.RESOLVING)
            with trace_span("resolving") as span:
                links = resolve_links(self._registry)
                if span:
                    span.annotate("broken", links.broken_count)
                try:
                    enforce_link_policy(links, strict=self._options.strict_links)
                except BrokenLinkError as exc:
                    self._errors.append(exc)
                    raise _CycleFailed from exc

            self._advance(CycleState.PUBLISHING)
            with trace_span("publishing"):
                documents, outputs = self._publish()

            self._advance(CycleState.DONE)
        except _CycleFailed:
            self._tracker.fail()
            logger.debug("Publish cycle failed with %d error(s)", len(self._errors))
        except BaseException:
            self._tracker.fail()
            raise

        ok = self._tracker.state == CycleState.DONE
        report = BuildReport(
            state=str(self._tracker.state),
            history=[str(s) for s in self._tracker.history],
            errors=[e.to_dict() for e in self._errors],
            warnings=[w.to_dict() for w in self._warnings],
            broken_links=links.as_sorted_dict() if links is not None else {},
            orphans=links.orphans if links is not None else [],
            sources=self._sources,
            published=len(documents) if ok and self._options.emit else 0,
            identifiers=[d.identifier for d in documents] if ok else [],
            outputs=outputs,
        )
        return CycleOutcome(
            report=report,
            registry=self._registry if ok else None,
            documents=documents if ok else (),
            links=links,
            errors=list(self._errors),
            warnings=list(self._warnings),
        )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _advance(self, target: CycleState) -> None:
        self._tracker.advance(target)
        logger.debug("Publish cycle -> %s", target)

    def _raise_if_errors(self) -> None:
        if self._errors:
            raise _CycleFailed

    def _parse_one(self, path: Path) -> ParsedSource | PublishError:
        content_root = self._site.content_root
        try:
            return read_source_file(content_root, path)
        except PublishError as exc:
            return exc.with_path(path)
        except (OSError, UnicodeDecodeError) as exc:
            return SourceReadError(f"Cannot read source file: {exc}", path=path)
        except ValueError as exc:
            # identifier derivation rejected the path
            return SourceReadError(str(exc), path=path)

    def _parse_all(self) -> list[ParsedSource]:
        """Parse every source file; independent files may run in parallel.

        All workers are joined before this returns. Results keep the sorted
        discovery order regardless of completion order.
        """
        paths = self._site.find_sources()
        self._sources = len(paths)
        workers = max(1, self._options.workers)
        span = get_current_span()
        if span:
            span.annotate("workers", workers)
        if workers > 1 and len(paths) > 1:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(self._parse_one, paths))
        else:
            results = [self._parse_one(p) for p in paths]

        parsed: list[ParsedSource] = []
        for item in results:
            if isinstance(item, PublishError):
                self._errors.append(item)
            else:
                parsed.append(item)
        logger.debug("Parsed %d of %d source files", len(parsed), len(paths))
        return parsed

    def _validate_all(self, parsed: list[ParsedSource]) -> list[Document]:
        settings = self._site.settings
        validated: list[Document] = []
        for source in parsed:
            try:
                result = validate_metadata(
                    source,
                    max_description_length=settings.validation.max_description_length,
                    base_path=settings.links.base_path,
                    asset_exists=self._site.assets.exists,
                )
            except PublishError as exc:
                self._errors.append(exc)
                continue
            for warning in result.warnings:
                if self._options.strict_assets and isinstance(warning, AssetNotFoundError):
                    self._errors.append(warning)
                else:
                    self._warnings.append(warning)
            validated.append(result.document)
        return validated

    def _register_all(self, documents: list[Document]) -> None:
        for doc in documents:
            try:
                self._registry.add(doc)
            except PublishError as exc:
                self._errors.append(exc)

    def _publish(self) -> tuple[tuple[Document, ...], list[str]]:
        if not self._options.emit:
            return order_documents(self._registry.all()), []
        output_dir = self._options.output_dir or self._site.output_dir
        publisher = Publisher(self._site.plugins, output_dir)
        try:
            outcome = publisher.publish(self._registry)
        except PublishError as exc:
            self._errors.append(exc)
            raise _CycleFailed from exc
        return outcome.documents, outcome.outputs


# ---------------------------------------------------------------------------
# BuildService
# ---------------------------------------------------------------------------


def _format_issue(issue: PublishError) -> str:
    if issue.path is not None:
        return f"{issue.path}: {issue.message}"
    return issue.message


class BuildService(BaseService):
    """Runs publish cycles and exposes their results as ServiceResults."""

    def _options(
        self,
        *,
        strict_links: bool | None,
        strict_assets: bool | None,
        workers: int | None,
        emit: bool,
        output_dir: Path | None = None,
    ) -> CycleOptions:
        settings = self._site.settings
        return CycleOptions(
            strict_links=settings.links.strict if strict_links is None else strict_links,
            strict_assets=settings.assets.strict if strict_assets is None else strict_assets,
            workers=settings.build.workers if workers is None else workers,
            emit=emit,
            output_dir=output_dir,
        )

    def run_cycle(self, options: CycleOptions) -> CycleOutcome:
        """Run one fresh cycle with explicit *options*."""
        return PublishCycle(self._site, options).run()

    def _result(self, op: str, outcome: CycleOutcome) -> ServiceResult:
        report = outcome.report
        warnings = [_format_issue(w) for w in outcome.warnings]
        if report.ok:
            warnings.extend(
                f"{source}: broken link to {target!r}"
                for source, targets in report.broken_links.items()
                for target in targets
            )
            return ServiceResult(
                ok=True,
                op=op,
                data=report.model_dump(),
                warnings=warnings,
            )
        first = outcome.errors[0] if outcome.errors else None
        code = first.code if first is not None and len(outcome.errors) == 1 else "BUILD_FAILED"
        return ServiceResult(
            ok=False,
            op=op,
            data=report.model_dump(),
            warnings=warnings,
            error=ServiceError(
                code=code,
                message="; ".join(_format_issue(e) for e in outcome.errors) or "Build failed",
                detail={"errors": report.errors},
            ),
        )

    @traced
    def build(
        self,
        *,
        strict_links: bool | None = None,
        strict_assets: bool | None = None,
        workers: int | None = None,
        output_dir: Path | None = None,
    ) -> ServiceResult:
        """Run a full publish cycle and emit to the renderers."""
        outcome = self.run_cycle(
            self._options(
                strict_links=strict_links,
                strict_assets=strict_assets,
                workers=workers,
                emit=True,
                output_dir=output_dir,
            )
        )
        warnings: list[str] = []
        report = outcome.report
        self._notify(
            "post_build",
            {
                "ok": report.ok,
                "state": report.state,
                "published": report.published,
                "report": report.model_dump(),
            },
            warnings,
        )
        result = self._result("build", outcome)
        if warnings:
            result = result.model_copy(update={"warnings": [*result.warnings, *warnings]})
        return result

    @traced
    def check(
        self,
        *,
        strict_links: bool | None = None,
        strict_assets: bool | None = None,
        workers: int | None = None,
    ) -> ServiceResult:
        """Run every phase except emission."""
        outcome = self.run_cycle(
            self._options(
                strict_links=strict_links,
                strict_assets=strict_assets,
                workers=workers,
                emit=False,
            )
        )
        return self._result("check", outcome)

    @traced
    def list_documents(self) -> ServiceResult:
        """Documents in publish order, without emitting them."""
        outcome = self.run_cycle(
            self._options(strict_links=False, strict_assets=False, workers=None, emit=False)
        )
        if not outcome.report.ok:
            return self._result("list", outcome)
        items = [doc.summary() for doc in outcome.documents]
        return ServiceResult(
            ok=True,
            op="list",
            data={"items": items, "count": len(items)},
            warnings=[_format_issue(w) for w in outcome.warnings],
        )

    @traced
    def show(self, identifier: str) -> ServiceResult:
        """One document's metadata, links, backlinks and broken links."""
        outcome = self.run_cycle(
            self._options(strict_links=False, strict_assets=False, workers=None, emit=False)
        )
        if outcome.registry is None:
            return self._result("show", outcome)
        try:
            doc = outcome.registry.get(identifier)
        except NotFoundError as exc:
            return ServiceResult(
                ok=False,
                op="show",
                error=ServiceError(code=exc.code, message=exc.message, detail=exc.detail()),
            )
        links = outcome.links
        data = doc.summary()
        data["backlinks"] = sorted(
            d.identifier for d in outcome.registry.all() if identifier in d.links
        )
        data["broken_links"] = sorted(links.broken_for(identifier)) if links is not None else []
        return ServiceResult(ok=True, op="show", data=data)
