"""Component scaffolder -- renders React sources and registration wiring.

Takes a stored component schema and writes a presentational component, its
CSS module and a Storyblok wrapper into the Next.js app, then regenerates
``generated.components.ts``.

Quick usage::

    from src.config import Config
    from src.scaffolder import ComponentScaffolder

    scaffolder = ComponentScaffolder(Config.from_env())
    result = scaffolder.generate("benefits_section")
"""

from src.scaffolder.generator import (
    ComponentFileStatus,
    ComponentPaths,
    ComponentScaffolder,
    ScaffoldResult,
    ScaffoldSources,
)
from src.scaffolder.registry import RegistryEntry, RegistryWriter
from src.scaffolder.templates import TemplateRenderer
from src.scaffolder.test_page import generate_test_data, render_test_page, write_test_page

__all__ = [
    "ComponentFileStatus",
    "ComponentPaths",
    "ComponentScaffolder",
    "RegistryEntry",
    "RegistryWriter",
    "ScaffoldResult",
    "ScaffoldSources",
    "TemplateRenderer",
    "generate_test_data",
    "render_test_page",
    "write_test_page",
]
