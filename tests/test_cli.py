"""Tests for the command-line interface (src.cli).

Each command is driven through ``main(argv, config)`` and asserted on its
exit code and the files it leaves behind. HTTP goes through
``httpx.MockTransport`` and subprocesses are patched out.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from src.cli import build_parser, component_file_issues, main
from src.cms.content import ContentClient
from src.cms.push import PushClient
from src.scaffolder.generator import ComponentScaffolder

pytestmark = pytest.mark.unit


def _exit_code(argv: list[str], config) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv, config=config)
    return exc_info.value.code


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_push_method_choices(self):
        args = build_parser().parse_args(["push-schema", "x", "--push-method", "direct"])
        assert args.push_method == "direct"
        with pytest.raises(SystemExit):
            build_parser().parse_args(["push-schema", "x", "--push-method", "ftp"])

    def test_generate_schema_arguments(self):
        args = build_parser().parse_args(
            ["generate-schema", "stats_section", "Stats", "--figma-url", "u", "--no-orchestrate"]
        )
        assert args.name == "stats_section"
        assert args.display_name == "Stats"
        assert args.figma_url == "u"
        assert args.no_orchestrate is True


# ---------------------------------------------------------------------------
# generate-schema / generate-component
# ---------------------------------------------------------------------------


class TestGenerate:
    def test_generate_schema_without_orchestration(self, config):
        assert _exit_code(["generate-schema", "stats_section", "--no-orchestrate"], config) == 0
        assert (config.nested_dir / "stat_item.json").exists()
        assert (config.bloks_dir / "stats_section.json").exists()

    def test_generate_component(self, config, populated_store):
        assert _exit_code(["generate-component", "hero_section"], config) == 0
        assert (config.wrapper_dir / "hero_section.tsx").exists()
        assert (config.presentational_dir / "HeroSection.tsx").exists()
        assert "'hero_section': HeroSection," in config.registry_path.read_text(encoding="utf-8")

    def test_generate_component_missing_schema(self, config, capsys):
        assert _exit_code(["generate-component", "ghost"], config) == 1
        assert "Schema file not found: ghost.json" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# validate-schema / test-component
# ---------------------------------------------------------------------------


class TestValidate:
    def test_fails_until_component_generated(self, config, populated_store, capsys):
        assert _exit_code(["validate-schema", "hero_section"], config) == 1
        out = capsys.readouterr().out
        assert "Presentational component not found" in out
        assert "Component not registered in generated.components.ts" in out

    def test_passes_after_generation(self, config, populated_store, capsys):
        ComponentScaffolder(config, populated_store).generate("hero_section")
        assert _exit_code(["validate-schema", "hero_section"], config) == 0
        assert "Schema validation passed!" in capsys.readouterr().out

    def test_missing_schema(self, config):
        assert _exit_code(["validate-schema", "ghost"], config) == 1

    def test_component_file_issue_order(self, config, populated_store):
        status = ComponentScaffolder(config, populated_store).check_component_files("hero_section")
        messages = [issue.message for issue in component_file_issues(status)]
        assert messages[0].startswith("Presentational component not found: ")
        assert messages[1].startswith("Storyblok wrapper not found: ")
        assert messages[2] == "Component not registered in generated.components.ts"


class TestTestComponent:
    def test_requires_generated_files(self, config, populated_store):
        assert _exit_code(["test-component", "hero_section"], config) == 1
        assert not config.test_pages_dir.exists()

    def test_writes_test_page(self, config, populated_store):
        ComponentScaffolder(config, populated_store).generate("hero_section")
        assert _exit_code(["test-component", "hero_section"], config) == 0
        assert (config.test_pages_dir / "hero_section.test.tsx").exists()

    def test_reports_fields_forwarded_by_wrapper(self, config, populated_store, capsys):
        ComponentScaffolder(config, populated_store).generate("hero_section")
        assert _exit_code(["test-component", "hero_section"], config) == 0
        out = capsys.readouterr().out
        assert "headline: accessible" in out
        assert "not accessible" not in out

    def test_field_dropped_from_wrapper_is_not_accessible(self, config, populated_store, capsys):
        ComponentScaffolder(config, populated_store).generate("hero_section")
        wrapper = config.wrapper_dir / "hero_section.tsx"
        source = wrapper.read_text(encoding="utf-8")
        wrapper.write_text(source.replace("subtext={blok.subtext}", ""), encoding="utf-8")

        assert _exit_code(["test-component", "hero_section"], config) == 1
        out = capsys.readouterr().out
        assert "subtext: not accessible" in out
        assert "headline: accessible" in out


# ---------------------------------------------------------------------------
# push-schema
# ---------------------------------------------------------------------------


def _patched_push_client(handler):
    transport = httpx.MockTransport(handler)
    return patch("src.cli.PushClient", lambda cfg: PushClient(cfg, transport=transport))


class TestPush:
    def test_push_one(self, config, populated_store):
        with _patched_push_client(lambda request: httpx.Response(200, json={"success": True})):
            assert _exit_code(["push-schema", "hero_section"], config) == 0

    def test_push_failure(self, config, populated_store):
        with _patched_push_client(lambda request: httpx.Response(500, text="down")):
            assert _exit_code(["push-schema", "hero_section"], config) == 1

    def test_push_all(self, config, populated_store):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.read().decode())
            return httpx.Response(200, json={})

        with _patched_push_client(handler):
            assert _exit_code(["push-schema", "--all"], config) == 0
        assert len(seen) == 2

    def test_name_or_all_required(self, config):
        assert _exit_code(["push-schema"], config) == 1


# ---------------------------------------------------------------------------
# orchestrate
# ---------------------------------------------------------------------------


class TestOrchestrate:
    def test_orchestrate_exit_codes(self, config, populated_store):
        run = AsyncMock(return_value=(0, "", ""))
        with patch("src.pipeline.run_command", run):
            assert _exit_code(
                ["orchestrate", "hero_section", "--skip-push", "--skip-code-review"], config
            ) == 0
        run.assert_awaited_once()

    def test_orchestrate_missing_schema(self, config):
        assert _exit_code(["orchestrate", "ghost", "--skip-code-review"], config) == 1


# ---------------------------------------------------------------------------
# check-story
# ---------------------------------------------------------------------------


class TestCheckStory:
    def _patched(self, story):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"story": story}))
        return patch("src.cli.ContentClient", lambda cfg: ContentClient(cfg, transport=transport))

    def test_all_registered(self, config, populated_store):
        config.wrapper_dir.mkdir(parents=True)
        (config.wrapper_dir / "default-page.tsx").write_text(
            "export default function DefaultPage() { return null }\n", encoding="utf-8"
        )
        ComponentScaffolder(config, populated_store).generate("hero_section")
        story = {"content": {"component": "default-page", "body": [{"component": "hero_section"}]}}
        with self._patched(story):
            assert _exit_code(["check-story", "home"], config) == 0

    def test_unregistered_block(self, config, capsys):
        story = {"content": {"component": "default-page", "body": [{"component": "pricing_table"}]}}
        with self._patched(story):
            assert _exit_code(["check-story", "home", "--draft"], config) == 1
        assert "pricing_table" in capsys.readouterr().out

    def test_fetch_error(self, config):
        config.storyblok_access_token = None
        assert _exit_code(["check-story", "home"], config) == 1


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


def test_unexpected_error_exits_one(config, capsys):
    with patch("src.cli.Orchestrator", side_effect=RuntimeError("kaput")):
        assert _exit_code(["orchestrate", "hero_section"], config) == 1
    assert "Error: kaput" in capsys.readouterr().out
