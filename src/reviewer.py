"""Advisory code review for generated components.

Runs the Next.js app's type-check and lint scripts and collects their error
and warning lines. Review results are informational: nothing here raises and
a failed review never fails the surrounding workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from src.config import Config
from src.utils import console, run_command

_TS_ERROR_MARKER = "error TS"


@dataclass
class CodeReviewResult:
    """Structured result from a type-check and lint pass."""

    success: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    typecheck_passed: bool = False
    lint_passed: bool = False

    def summary(self) -> str:
        """Return a human-readable summary."""
        status = "PASSED" if self.success else "ISSUES FOUND"
        return "\n".join(
            [
                f"Code review: {status}",
                f"Type check: {'passed' if self.typecheck_passed else 'failed'}",
                f"Lint: {'passed' if self.lint_passed else 'failed'}",
                f"Errors: {len(self.errors)}",
                f"Warnings: {len(self.warnings)}",
            ]
        )


def _lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.strip()]


def parse_typecheck_output(exit_code: int, stdout: str, stderr: str) -> tuple[bool, list[str]]:
    """Interpret a type-check run.

    Returns:
        ``(passed, errors)``. ``error TS`` lines always count as errors; a
        failing run without any is reported as one opaque error.
    """
    output = stderr or stdout
    error_lines = [line for line in _lines(output) if _TS_ERROR_MARKER in line]
    if error_lines:
        return False, error_lines
    if exit_code == 0:
        return True, []
    detail = stderr or stdout or f"exit code {exit_code}"
    return False, [f"TypeScript check failed: {detail}"]


def parse_lint_output(exit_code: int, stdout: str, stderr: str) -> tuple[bool, list[str], list[str]]:
    """Interpret a lint run.

    Returns:
        ``(passed, errors, warnings)``. Warnings are collected from stdout on
        every run. A non-zero exit is a failure only when the output names at
        least one error line.
    """
    warnings = [line for line in _lines(stdout) if "warning" in line]
    if exit_code == 0:
        return True, [], warnings
    if exit_code < 0:
        # The runner could not start or finish the lint command.
        return False, [f"ESLint failed: {stderr or stdout}"], warnings

    output = stderr or stdout
    error_lines = [
        line for line in _lines(output) if "error" in line and "Warning" not in line
    ]
    return not error_lines, error_lines, warnings


class CodeReviewer:
    """Runs the configured type-check and lint commands in the app root."""

    def __init__(self, config: Config) -> None:
        self.config = config

    async def review(self, component_name: str | None = None) -> CodeReviewResult:
        """Type-check and lint the app.

        Args:
            component_name: Shown in the console panel title only. Both tools
                always check the whole app.
        """
        label = component_name or "app"
        console.print(
            Panel(
                f"[cyan]Running code review[/cyan]\n"
                f"  Component: {escape(label)}\n"
                f"  App root: {escape(str(self.config.app_root))}",
                title="Code Review",
                border_style="cyan",
            )
        )

        review_cfg = self.config.review
        errors: list[str] = []

        console.print("  [dim]Running TypeScript type check...[/dim]")
        code, out, err = await run_command(
            review_cfg.typecheck_command,
            cwd=self.config.app_root,
            timeout=review_cfg.typecheck_timeout,
        )
        typecheck_passed, ts_errors = parse_typecheck_output(code, out, err)
        errors.extend(ts_errors)

        console.print("  [dim]Running ESLint...[/dim]")
        code, out, err = await run_command(
            review_cfg.lint_command,
            cwd=self.config.app_root,
            timeout=review_cfg.lint_timeout,
        )
        lint_passed, lint_errors, warnings = parse_lint_output(code, out, err)
        errors.extend(lint_errors)

        result = CodeReviewResult(
            success=not errors and typecheck_passed and lint_passed,
            errors=errors,
            warnings=warnings,
            typecheck_passed=typecheck_passed,
            lint_passed=lint_passed,
        )
        self._display_result(result, label)
        return result

    def _display_result(self, result: CodeReviewResult, label: str) -> None:
        """Display a formatted review summary to the console."""
        if result.success:
            style = "green"
            title = f"Code Review Passed: {escape(label)}"
        else:
            style = "yellow"
            title = f"Code Review Found Issues: {escape(label)}"

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("Key", style="bold")
        table.add_column("Value")

        table.add_row(
            "Type check",
            "[green]PASSED[/green]" if result.typecheck_passed else "[red]FAILED[/red]",
        )
        table.add_row("Lint", "[green]PASSED[/green]" if result.lint_passed else "[red]FAILED[/red]")
        table.add_row("Errors", str(len(result.errors)))
        table.add_row("Warnings", str(len(result.warnings)))

        console.print(Panel(table, title=title, border_style=style))

        if result.errors:
            console.print("[bold red]Errors:[/bold red]")
            for i, error in enumerate(result.errors[:10], 1):
                console.print(f"  {i}. {escape(error)}")
            if len(result.errors) > 10:
                console.print(f"  [dim]... and {len(result.errors) - 10} more errors[/dim]")

        if result.warnings:
            console.print("[bold yellow]Warnings:[/bold yellow]")
            for w in result.warnings[:5]:
                console.print(f"  - {escape(w)}")
