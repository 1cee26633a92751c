"""
Text artifact rendering with Jinja2.

Templates are looked up in the project's ``templates/`` directory first and in
the copies bundled with the package second, so a project can override any of
them by file name.
"""

from dataclasses import dataclass
from pathlib import Path

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
)

from iconpack.config.paths import BUNDLED_TEMPLATES_DIR
from iconpack.core.errors import EngineError
from iconpack.core.naming import normalize
from iconpack.utils.logging import logger


@dataclass(frozen=True)
class TemplateTask:
    """One template rendered to one output file."""

    template: str
    output_dir: Path
    basename: str

    @property
    def output_path(self) -> Path:
        return self.output_dir / (self.basename + Path(self.template).suffix)


def create_environment(project_templates: Path) -> Environment:
    """Build a Jinja2 environment with the ``glyph_name`` filter registered."""
    env = Environment(
        loader=ChoiceLoader(
            [
                FileSystemLoader(str(project_templates)),
                FileSystemLoader(str(BUNDLED_TEMPLATES_DIR)),
            ]
        ),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["glyph_name"] = normalize
    return env


def render_task(env: Environment, task: TemplateTask, context: dict) -> Path:
    """
    Render a single template task.

    Raises:
        EngineError: If the template is missing or fails to render
    """
    logger.debug(f"Rendering template: {task.template}")
    try:
        text = env.get_template(task.template).render(**context)
    except TemplateError as e:
        raise EngineError(f"{task.template}: {e}") from e

    output_path = task.output_path
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    logger.info(f"Rendered {task.template} -> {output_path}")
    return output_path
