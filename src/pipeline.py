"""Blok schema generator workflow orchestrator.

Runs one component through the four-stage workflow:

Stage 1: VALIDATE_SCHEMA -- structural and nested-reference validation.
Stage 2: SCAFFOLD        -- generate the React sources in a subprocess.
Stage 3: PUSH            -- deliver the schema to the remote CMS.
Stage 4: REVIEW          -- advisory type-check and lint of the app.

Validation and scaffold failures stop the run. A failed push is reported and
marks the run unsuccessful, but the review still runs. Review findings are
warnings only.

Usage::

    orchestrator = Orchestrator(Config.from_env())
    result = await orchestrator.run("stats_section")
"""

from __future__ import annotations

import re
import sys
import time
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from rich.markup import escape
from rich.panel import Panel

from src.cms.push import PushClient, PushMethod, PushResult
from src.config import Config
from src.reviewer import CodeReviewer, CodeReviewResult
from src.schema.mapper import SchemaMapper, build_schemas
from src.schema.store import SchemaStore
from src.schema.validator import validate_schema_file
from src.utils import (
    console,
    format_duration,
    print_error,
    print_step_header,
    print_success,
    print_warning,
    run_command,
)

# Directory containing the ``src`` package; the scaffold subprocess runs here.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent

_NODE_ID_RE = re.compile(r"node-id=([\d-]+)")


# ---------------------------------------------------------------------------
# Stages, options and results
# ---------------------------------------------------------------------------


class Stage(str, Enum):
    """Workflow states; ``DONE`` and ``FAILED`` are terminal."""
    VALIDATE_SCHEMA = "validate_schema"
    SCAFFOLD = "scaffold"
    PUSH = "push"
    REVIEW = "review"
    DONE = "done"
    FAILED = "failed"


STAGE_NAMES: dict[Stage, str] = {
    Stage.VALIDATE_SCHEMA: "Validate schema",
    Stage.SCAFFOLD: "Generate React component",
    Stage.PUSH: "Push to Storyblok",
    Stage.REVIEW: "Code review",
}


class PipelineError(Exception):
    """Raised when a stage fails and the workflow must stop."""

    def __init__(self, stage: Stage, message: str) -> None:
        self.stage = stage
        super().__init__(f"{STAGE_NAMES.get(stage, stage.value)}: {message}")


class OrchestrationOptions(BaseModel):
    """Per-run switches for partial workflows."""

    skip_validation: bool = False
    skip_component: bool = False
    skip_push: bool = False
    skip_code_review: bool = False
    push_method: PushMethod = PushMethod.N8N


class OrchestrationResult(BaseModel):
    """Final state of one orchestrated run."""

    name: str
    success: bool = False
    stage: Stage = Stage.VALIDATE_SCHEMA
    failed_stage: Stage | None = Field(default=None, description="Stage that stopped the run")
    errors: list[str] = Field(default_factory=list)
    push_result: PushResult | None = None
    review_result: CodeReviewResult | None = None
    stages_completed: list[Stage] = Field(default_factory=list)
    duration: float = 0.0


class GenerationResult(BaseModel):
    """Outcome of generating a schema and its prerequisites."""

    written: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    orchestrations: list[OrchestrationResult] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(run.success for run in self.orchestrations)


def design_context_note(name: str, design_url: str) -> str | None:
    """Turn a design URL into a stored design-reference note.

    ``...?node-id=1-155`` becomes node ``1:155``. URLs without a node id
    yield ``None``.
    """
    match = _NODE_ID_RE.search(design_url)
    if match is None:
        return None
    node_id = match.group(1).replace("-", ":")
    return f"Figma design context for {name} - node-id: {node_id}"


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class Orchestrator:
    """Drives schemas through validate, scaffold, push and review.

    Attributes:
        config: Global configuration.
        store: Schema store rooted at ``config.schemas_root``.
        push_client: Client used for the push stage.
        reviewer: Runner for the review stage.
    """

    def __init__(
        self,
        config: Config,
        store: SchemaStore | None = None,
        push_client: PushClient | None = None,
        reviewer: CodeReviewer | None = None,
    ) -> None:
        self.config = config
        self.store = store or SchemaStore(config.schemas_root)
        self.push_client = push_client or PushClient(config, store=self.store)
        self.reviewer = reviewer or CodeReviewer(config)

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    async def run(
        self, name: str, options: OrchestrationOptions | None = None
    ) -> OrchestrationResult:
        """Run the workflow for one stored schema."""
        options = options or OrchestrationOptions()
        started = time.monotonic()
        result = OrchestrationResult(name=name)

        console.print(
            Panel(
                f"[bold bright_cyan]Orchestrating workflow[/bold bright_cyan]\n"
                f"Component   : {escape(name)}\n"
                f"Push method : {options.push_method.value}",
                title="[bold]Workflow Start[/bold]",
                border_style="bright_cyan",
            )
        )

        try:
            if not self.store.exists(name):
                raise PipelineError(
                    Stage.VALIDATE_SCHEMA,
                    f"Schema not found: {name}.json. "
                    f"Generate it first with: blokgen generate-schema {name}",
                )

            await self._validate(name, options, result)
            await self._scaffold(name, options, result)
            push_ok = await self._push(name, options, result)
            await self._review(name, options, result)

            result.stage = Stage.DONE
            result.success = push_ok
        except PipelineError as exc:
            result.failed_stage = exc.stage
            result.stage = Stage.FAILED
            result.success = False
            result.errors.append(str(exc))
            print_error(str(exc))

        result.duration = time.monotonic() - started
        self._print_final_summary(result)
        return result

    async def _validate(
        self, name: str, options: OrchestrationOptions, result: OrchestrationResult
    ) -> None:
        result.stage = Stage.VALIDATE_SCHEMA
        print_step_header(1, STAGE_NAMES[Stage.VALIDATE_SCHEMA])
        if options.skip_validation:
            print_warning("Skipping validation")
            return

        report = validate_schema_file(name, self.store)
        if not report.valid:
            result.errors.extend(str(issue) for issue in report.errors)
            for index, issue in enumerate(report.errors, 1):
                console.print(f"  {index}. {escape(str(issue))}")
            raise PipelineError(
                Stage.VALIDATE_SCHEMA, f"Schema validation failed ({len(report.errors)} errors)"
            )

        print_success("Validation passed")
        result.stages_completed.append(Stage.VALIDATE_SCHEMA)

    async def _scaffold(
        self, name: str, options: OrchestrationOptions, result: OrchestrationResult
    ) -> None:
        result.stage = Stage.SCAFFOLD
        print_step_header(2, STAGE_NAMES[Stage.SCAFFOLD])
        if options.skip_component:
            print_warning("Skipping component generation")
            return

        exit_code, stdout, stderr = await self._generate_component(name)
        if exit_code != 0:
            raise PipelineError(
                Stage.SCAFFOLD,
                f"Component generation failed: {stderr or stdout or f'exit code {exit_code}'}",
            )

        print_success("Component generated")
        result.stages_completed.append(Stage.SCAFFOLD)

    async def _generate_component(self, name: str) -> tuple[int, str, str]:
        """Run ``generate-component`` in a child interpreter.

        The child rebuilds its ``Config`` with ``Config.from_env``, so every
        setting the scaffolder reads is passed through the environment.
        """
        return await run_command(
            [sys.executable, "-m", "src.cli", "generate-component", name],
            cwd=_PROJECT_ROOT,
            env={
                "BLOKGEN_SCHEMAS_ROOT": str(self.config.schemas_root.resolve()),
                "BLOKGEN_APP_ROOT": str(self.config.app_root.resolve()),
                "BLOKGEN_EXTRA_REGISTRATIONS": ",".join(self.config.extra_registrations),
            },
        )

    async def _push(
        self, name: str, options: OrchestrationOptions, result: OrchestrationResult
    ) -> bool:
        result.stage = Stage.PUSH
        print_step_header(3, STAGE_NAMES[Stage.PUSH])
        if options.skip_push:
            print_warning("Skipping push")
            return True

        # Already validated (or deliberately skipped) above.
        push_result = await self.push_client.push(
            name, validate=False, method=options.push_method
        )
        result.push_result = push_result
        if not push_result.success:
            result.errors.append(f"Push failed: {push_result.message}")
            print_error(f"Push failed: {push_result.message}")
            return False

        print_success(f"Pushed to Storyblok: {name}")
        if push_result.component_id:
            console.print(f"  Component ID: {escape(push_result.component_id)}")
        if push_result.message:
            console.print(f"  {escape(push_result.message)}")
        result.stages_completed.append(Stage.PUSH)
        return True

    async def _review(
        self, name: str, options: OrchestrationOptions, result: OrchestrationResult
    ) -> None:
        result.stage = Stage.REVIEW
        print_step_header(4, STAGE_NAMES[Stage.REVIEW])
        if options.skip_code_review:
            print_warning("Skipping code review")
            return

        review_result = await self.reviewer.review(name)
        result.review_result = review_result
        if not review_result.success:
            print_warning(
                "Code review found issues. Run 'npm run lint' and 'npm run typecheck' "
                "in the app for details."
            )
        result.stages_completed.append(Stage.REVIEW)

    # ------------------------------------------------------------------
    # Schema generation
    # ------------------------------------------------------------------

    async def generate(
        self,
        name: str,
        display_name: str | None = None,
        design_url: str | None = None,
        orchestrate: bool = True,
        options: OrchestrationOptions | None = None,
    ) -> GenerationResult:
        """Build and persist *name* plus the nested schemas it depends on.

        Prerequisites are written (and orchestrated) before the main schema
        so that its nested-reference validation can succeed. Schemas that
        already exist are left untouched and are not orchestrated again.
        """
        outcome = GenerationResult()

        note: str | None = None
        if design_url:
            note = design_context_note(name, design_url)
            if note is None:
                print_warning("No node-id found in design URL; component will use the skeleton layout")
            else:
                print_success(f"Design context retrieved ({note.rsplit(': ', 1)[-1]})")

        for schema, category in build_schemas(name, display_name, SchemaMapper()):
            written = self.store.write(schema, category, skip_if_exists=True)
            if written.skipped:
                print_warning(
                    f"Schema already exists, skipping: {schema.name}.json ({category.value})"
                )
                outcome.skipped.append(schema.name)
                continue

            print_success(f"Schema generated: {written.path}")
            console.print(f"  Fields: {len(schema.fields)}")
            console.print(f"  Category: {category.value}")
            outcome.written.append(schema.name)

            if note is not None:
                path = self.store.save_design_context(schema.name, note)
                console.print(f"  Stored design context: {escape(str(path))}")

            if orchestrate:
                outcome.orchestrations.append(await self.run(schema.name, options))

        return outcome

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def _print_final_summary(self, result: OrchestrationResult) -> None:
        """Print the final workflow summary panel."""
        if result.success:
            border_style = "bold green"
            status_text = "[bold green]WORKFLOW SUCCEEDED[/bold green]"
        else:
            border_style = "bold red"
            status_text = "[bold red]WORKFLOW FAILED[/bold red]"

        completed = ", ".join(STAGE_NAMES[s] for s in result.stages_completed)
        detail_lines = [
            status_text,
            "",
            f"Component : {escape(result.name)}",
            f"Duration  : {format_duration(result.duration)}",
            f"Completed : {completed or 'none'}",
        ]
        if result.failed_stage is not None:
            detail_lines.append(f"Failed    : {STAGE_NAMES[result.failed_stage]}")
        if result.review_result is not None and not result.review_result.success:
            detail_lines.append("Review    : issues found (advisory)")

        console.print()
        console.print(
            Panel(
                "\n".join(detail_lines),
                title="[bold]Workflow Complete[/bold]",
                border_style=border_style,
            )
        )
