import logging
from pathlib import Path

from inkwell.core.exceptions import ValidationFailure

logger = logging.getLogger(__name__)


def list_files(root: str | Path) -> list[Path]:
    """Every file under `root`, recursively, as paths relative to `root`.

    A missing root yields an empty list.

    Example:
        >>> list_files("static/media")
        [PosixPath('1/cover.png'), PosixPath('2/diagram.svg')]
    """
    base = Path(root)
    if not base.is_dir():
        return []
    return sorted(p.relative_to(base) for p in base.rglob("*") if p.is_file())


def _safe_name(filename: str) -> str:
    name = Path(filename.replace("\\", "/")).name
    if not name or name in {".", ".."} or name != filename:
        msg = f"Invalid upload filename: {filename!r}"
        raise ValidationFailure(msg)
    return name


def save_upload(root: str | Path, article_id: int, filename: str, data: bytes) -> Path:
    """Write an upload to `root/<article_id>/<filename>` and return that path.

    Raises:
        ValidationFailure: If the id is negative or the filename carries a
            directory component.

    Example:
        >>> save_upload("static/media", 3, "cover.png", b"...")
        PosixPath('static/media/3/cover.png')
    """
    if article_id < 0:
        msg = f"Invalid article id: {article_id}"
        raise ValidationFailure(msg)
    name = _safe_name(filename)
    directory = Path(root) / str(article_id)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / name
    target.write_bytes(data)
    logger.info("Saved upload %s (%d bytes)", target, len(data))
    return target
