from .files import list_files, save_upload

__all__ = ["list_files", "save_upload"]
