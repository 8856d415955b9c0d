"""Command-line interface for the blok schema generator.

Every command exits 0 on success and 1 on failure::

    blokgen generate-schema benefits_section "Benefits Section"
    blokgen generate-component benefits_section
    blokgen validate-schema benefits_section
    blokgen test-component benefits_section
    blokgen push-schema benefits_section --push-method=direct
    blokgen push-schema --all
    blokgen orchestrate stats_section --skip-component
    blokgen check-story home --draft
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Callable

from rich.markup import escape

from src.cms.content import ContentClient, ContentFetchError, find_unregistered, iter_blocks
from src.cms.push import PushClient, PushMethod, PushResult
from src.config import Config
from src.pipeline import OrchestrationOptions, Orchestrator
from src.scaffolder.generator import ComponentFileStatus, ComponentScaffolder
from src.scaffolder.test_page import write_test_page
from src.schema.store import SchemaNotFoundError, SchemaParseError, SchemaStore
from src.schema.validator import (
    ValidationIssue,
    check_nested_components,
    validate_schema_structure,
)
from src.utils import (
    console,
    dump_json,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)


def _print_issues(issues: list[ValidationIssue]) -> None:
    for index, issue in enumerate(issues, 1):
        console.print(f"  {index}. {escape(str(issue))}")


def component_file_issues(status: ComponentFileStatus) -> list[ValidationIssue]:
    """Report missing generated sources and a missing registration."""
    issues: list[ValidationIssue] = []
    if not status.presentational:
        issues.append(
            ValidationIssue(f"Presentational component not found: {status.paths.presentational}")
        )
    if not status.wrapper:
        issues.append(ValidationIssue(f"Storyblok wrapper not found: {status.paths.wrapper}"))
    if not status.registered:
        issues.append(ValidationIssue("Component not registered in generated.components.ts"))
    return issues


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_generate_schema(args: argparse.Namespace, config: Config) -> int:
    orchestrator = Orchestrator(config)
    options = OrchestrationOptions(push_method=PushMethod(args.push_method))
    outcome = asyncio.run(
        orchestrator.generate(
            args.name,
            display_name=args.display_name,
            design_url=args.figma_url,
            orchestrate=not args.no_orchestrate,
            options=options,
        )
    )
    if not outcome.written:
        print_warning("No new schemas written")
    return 0 if outcome.success else 1


def cmd_generate_component(args: argparse.Namespace, config: Config) -> int:
    scaffolder = ComponentScaffolder(config)
    try:
        schema = scaffolder.store.load_model(args.name)
    except (SchemaNotFoundError, SchemaParseError) as exc:
        print_error(str(exc))
        return 1

    console.print(f"\n[bold]Generating React component for:[/bold] {escape(args.name)}")
    console.print(f"  Display Name: {escape(schema.display_name)}")

    design_context = scaffolder.store.load_design_context(args.name)
    if design_context is not None:
        console.print("  Using stored design context for implementation")

    result = scaffolder.write(schema, design_context)
    for path in result.created:
        print_success(f"Created: {path}")
    for path in result.skipped:
        print_warning(f"Skipped (exists): {path}")
    if result.registry_updated:
        print_success("Updated generated.components.ts")

    paths = scaffolder.component_paths(args.name)
    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"  1. Implement the component JSX in {escape(str(paths.presentational))}")
    console.print(f"  2. Add styles to {escape(str(paths.style))}")
    console.print("  3. Test the component in Storyblok")
    return 0


def cmd_validate_schema(args: argparse.Namespace, config: Config) -> int:
    store = SchemaStore(config.schemas_root)
    try:
        loaded = store.load(args.name)
    except (SchemaNotFoundError, SchemaParseError) as exc:
        print_error(str(exc))
        return 1

    fields = loaded.data.get("schema") if isinstance(loaded.data, dict) else None
    console.print(f"\n[bold]Validating schema:[/bold] {escape(args.name)}")
    console.print(f"  Display Name: {escape(str(loaded.data.get('display_name')))}")
    console.print(f"  Fields: {len(fields) if isinstance(fields, dict) else 0}\n")

    status = ComponentScaffolder(config, store=store).check_component_files(args.name)
    issues = [
        *validate_schema_structure(loaded.data, args.name),
        *component_file_issues(status),
        *check_nested_components(loaded.data, store),
    ]

    if issues:
        print_error("Schema validation failed:")
        _print_issues(issues)
        return 1

    print_success("Schema validation passed!")
    for check in (
        "Schema structure is valid",
        "Field types are valid",
        "React components exist",
        "Component is registered",
        "Nested components exist",
    ):
        console.print(f"  [green]+[/green] {check}")
    return 0


def cmd_test_component(args: argparse.Namespace, config: Config) -> int:
    scaffolder = ComponentScaffolder(config)
    try:
        schema = scaffolder.store.load_model(args.name)
    except (SchemaNotFoundError, SchemaParseError) as exc:
        print_error(str(exc))
        return 1

    console.print(f"\n[bold]Testing component:[/bold] {escape(args.name)}")
    console.print(f"  Display Name: {escape(schema.display_name)}\n")

    status = scaffolder.check_component_files(args.name)
    print_summary_table(
        {
            "Presentational": "yes" if status.presentational else "missing",
            "Storyblok Wrapper": "yes" if status.wrapper else "missing",
            "Registered": "yes" if status.registered else "no",
        },
        title="Component Files",
    )
    if not status.complete:
        print_error(f"Component files are missing. Run: blokgen generate-component {args.name}")
        return 1

    path, test_data = write_test_page(schema, config, scaffolder.renderer)
    console.print("[bold]Test Data Generated:[/bold]")
    console.print(escape(dump_json(test_data)))
    print_success(f"Test page generated: {path}")

    # A field is reachable only if the wrapper forwards it to the component.
    wrapper_source = status.paths.wrapper.read_text(encoding="utf-8")
    missing = [name for name in schema.fields if f"{name}={{blok.{name}}}" not in wrapper_source]
    for name in schema.fields:
        if name not in missing:
            console.print(f"  [green]+[/green] {escape(name)}: accessible")
        else:
            console.print(f"  [red]x[/red] {escape(name)}: not accessible")

    for name, spec in schema.fields.items():
        if spec.component_whitelist:
            console.print(f"  Nested {escape(name)}: {escape(', '.join(spec.component_whitelist))}")

    return 1 if missing else 0


def _print_push_result(result: PushResult) -> None:
    if result.success:
        print_success(f"{result.name}: {result.message}")
        if result.component_id:
            console.print(f"  Component ID: {escape(result.component_id)}")
        return

    print_error(f"{result.name}: {result.message}")
    for index, error in enumerate(result.errors, 1):
        console.print(f"  {index}. {escape(error)}")


def cmd_push_schema(args: argparse.Namespace, config: Config) -> int:
    client = PushClient(config)
    method = PushMethod(args.push_method)

    if args.all:
        console.print(f"[bold]Pushing all schemas to Storyblok via {method.value}...[/bold]\n")
        summary = asyncio.run(client.push_all(method=method))
        for result in summary.results:
            _print_push_result(result)
        print_summary_table(
            {"Success": str(len(summary.succeeded)), "Failed": str(len(summary.failed))},
            title="Push Summary",
        )
        return 0 if summary.all_succeeded else 1

    if not args.name:
        print_error("Provide a component name or --all")
        return 1

    console.print(f"[bold]Pushing schema via {method.value}:[/bold] {escape(args.name)}")
    result = asyncio.run(client.push(args.name, validate=True, method=method))
    _print_push_result(result)
    return 0 if result.success else 1


def cmd_orchestrate(args: argparse.Namespace, config: Config) -> int:
    options = OrchestrationOptions(
        skip_validation=args.skip_validation,
        skip_component=args.skip_component,
        skip_push=args.skip_push,
        skip_code_review=args.skip_code_review,
        push_method=PushMethod(args.push_method),
    )
    result = asyncio.run(Orchestrator(config).run(args.name, options))
    return 0 if result.success else 1


def cmd_check_story(args: argparse.Namespace, config: Config) -> int:
    client = ContentClient(config)
    try:
        story = asyncio.run(client.fetch_story(args.slug, draft=args.draft))
    except ContentFetchError as exc:
        print_error(str(exc))
        return 1

    scaffolder = ComponentScaffolder(config)
    registered = scaffolder.registry.registered_names()
    blocks = list(iter_blocks(story.get("content")))
    unregistered = find_unregistered(story, registered)

    print_summary_table(
        {
            "Story": str(story.get("full_slug") or args.slug),
            "Version": "draft" if args.draft else "published",
            "Blocks": str(len(blocks)),
            "Unregistered types": ", ".join(unregistered) or "none",
        },
        title="Story Check",
    )
    if unregistered:
        print_error(f"{len(unregistered)} block type(s) have no registered component")
        return 1
    print_success("Every block type has a registered component")
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _add_push_method(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--push-method",
        choices=[m.value for m in PushMethod],
        default=PushMethod.N8N.value,
        help="Push transport (default: n8n)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blokgen",
        description="Storyblok schema generator -- schemas, components and CMS push",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  blokgen generate-schema benefits_section \"Benefits Section\"\n"
            "  blokgen orchestrate stats_section --push-method=direct\n"
            "  blokgen push-schema --all\n"
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("generate-schema", help="Generate a schema (and its nested schemas)")
    p.add_argument("name", help="Block name, e.g. benefits_section")
    p.add_argument("display_name", nargs="?", default=None, help="Human-readable name")
    p.add_argument("--figma-url", default=None, help="Design URL containing a node-id")
    p.add_argument(
        "--no-orchestrate",
        action="store_true",
        help="Only write schema files; skip validate/component/push/review",
    )
    _add_push_method(p)
    p.set_defaults(handler=cmd_generate_schema)

    p = sub.add_parser("generate-component", help="Generate React sources for a schema")
    p.add_argument("name")
    p.set_defaults(handler=cmd_generate_component)

    p = sub.add_parser("validate-schema", help="Validate a schema and its generated sources")
    p.add_argument("name")
    p.set_defaults(handler=cmd_validate_schema)

    p = sub.add_parser("test-component", help="Write a development test page")
    p.add_argument("name")
    p.set_defaults(handler=cmd_test_component)

    p = sub.add_parser("push-schema", help="Push one or all schemas to Storyblok")
    p.add_argument("name", nargs="?", default=None)
    p.add_argument("--all", action="store_true", help="Push every stored schema")
    _add_push_method(p)
    p.set_defaults(handler=cmd_push_schema)

    p = sub.add_parser("orchestrate", help="Validate, scaffold, push and review a component")
    p.add_argument("name")
    p.add_argument("--skip-validation", action="store_true")
    p.add_argument("--skip-component", action="store_true")
    p.add_argument("--skip-push", action="store_true")
    p.add_argument("--skip-code-review", action="store_true")
    _add_push_method(p)
    p.set_defaults(handler=cmd_orchestrate)

    p = sub.add_parser("check-story", help="List block types of a story without a component")
    p.add_argument("slug")
    p.add_argument("--draft", action="store_true", help="Fetch the draft version")
    p.set_defaults(handler=cmd_check_story)

    return parser


def main(argv: list[str] | None = None, config: Config | None = None) -> None:
    """CLI entry point for ``blokgen`` and ``python -m src.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = config or Config.from_env()

    handler: Callable[[argparse.Namespace, Config], int] = args.handler
    try:
        code = handler(args, config)
    except Exception as exc:  # noqa: BLE001
        print_error(f"Error: {exc}")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
