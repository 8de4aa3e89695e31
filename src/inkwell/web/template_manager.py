"""
Template loading and rendering for Inkwell.

The `TemplateManager` wraps a `Jinja2Templates` environment built from the
package's bundled `templates/` directory plus any override directories.
Directories passed explicitly take priority, so a deployment can restyle
single components without copying the rest.

Usage Lifecycle:
    1.  **Instantiation:** Created once in `create_app()` and stored on the
        application context.
    2.  **Rendering:** API routes return fragments via `.render(...)`; page
        routes use `.templates.TemplateResponse(...)`.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Sequence

from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from inkwell.content.render import render_markdown
from inkwell.core.exceptions import RenderError

logger = logging.getLogger(__name__)

BUNDLED_TEMPLATES = Path(__file__).parent / "templates"


class TemplateManager:
    """
    Manages Jinja2 template loading and context injection.

    **Lookup order:**
    1.  Paths passed via `extra_directories`, in the given order.
    2.  The templates bundled with `inkwell.web`.

    Attributes:
        templates (Jinja2Templates): The configured Jinja2 environment.

    Example:
        >>> manager = TemplateManager(global_context={"site_name": "Inkwell"})
        >>> manager.render("components/success.html")
        '<div class="success">...</div>'
    """

    def __init__(
        self,
        extra_directories: Sequence[Path | str] | None = None,
        global_context: dict[str, Any] | None = None,
        global_functions: dict[str, Callable] | None = None,
    ):
        """
        Initialize the TemplateManager and build the environment.

        Args:
            extra_directories (Sequence[Path | str] | None): Directories
                searched before the bundled templates.

            global_context (dict[str, Any] | None): Variables injected into
                *every* template (e.g., `{"site_name": "Inkwell"}`).

            global_functions (dict[str, Callable] | None): Functions available
                in *every* template.
        """
        self._directories: list[str] = []

        if extra_directories:
            for d in extra_directories:
                self._add_directory(d)

        self._add_directory(BUNDLED_TEMPLATES)

        logger.debug("Template directories: %s", self._directories)

        self.templates = Jinja2Templates(directory=self._directories)
        self.templates.env.filters["markdown"] = render_markdown

        if global_context:
            for name, value in global_context.items():
                self.templates.env.globals[name] = value

        if global_functions:
            for name, func in global_functions.items():
                self.templates.env.globals[name] = func

    @property
    def directories(self) -> list[str]:
        return list(self._directories)

    def _add_directory(self, path: Path | str) -> None:
        """
        Register a template directory once, as an absolute path.
        """
        path_str = str(Path(path).resolve())
        if path_str not in self._directories:
            self._directories.append(path_str)

    def render(self, name: str, context: dict[str, Any] | None = None) -> str:
        """
        Render a template to a string.

        Raises:
            RenderError: If the template is missing or fails while rendering.
        """
        try:
            template = self.templates.get_template(name)
            return template.render(**(context or {}))
        except TemplateError as e:
            logger.exception("Failed to render template %s", name)
            msg = f"Failed to render template {name}: {e}"
            raise RenderError(msg) from e


__all__ = ["BUNDLED_TEMPLATES", "TemplateManager"]
