from .app import create_app
from .context import AppContext, get_context, get_db
from .template_manager import TemplateManager

__all__ = ["AppContext", "TemplateManager", "create_app", "get_context", "get_db"]
