import logging

from clipfix.config import Settings
from clipfix.core.errors import ProjectRootError
from clipfix.core.ports.filesystem import FileSystem
from clipfix.core.rewrite import fix_audio_clip, fix_manual_content
from clipfix.core.walk import apply_to_tree, combine_reports
from clipfix.fs.overlay import OverlayFileSystem
from clipfix.models import Entry, FixRun

logger = logging.getLogger(__name__)


async def ensure_project_root(fs: FileSystem, root: Entry, settings: Settings) -> None:
    if root.kind != "directory":
        raise ProjectRootError(f"{root.path} is not a directory")
    for entry in await fs.list_entries(root):
        if entry.kind == "file" and entry.name.endswith(settings.project_marker_suffix):
            return
    raise ProjectRootError(f"Couldn't find a {settings.project_marker_suffix} file in {root.path}")


def _stage_dry_run(fs: FileSystem, settings: Settings) -> tuple[FileSystem, Settings]:
    # A dry run writes into an overlay so the audio pass sees the content pass output.
    if not settings.dry_run:
        return fs, settings
    return OverlayFileSystem(fs), settings.model_copy(update={"dry_run": False})


async def run_fix(fs: FileSystem, root: Entry, settings: Settings) -> FixRun:
    """Fix content references first, then audio clip calls, across the whole project."""
    await ensure_project_root(fs, root, settings)
    fs, settings = _stage_dry_run(fs, settings)
    content = await apply_to_tree(fs, root, fix_manual_content, settings)
    audio = await apply_to_tree(fs, root, fix_audio_clip, settings)
    logger.info(
        "Fixed %d content references and %d audio clip calls (%d unresolved)",
        content.fixed,
        audio.fixed,
        len(audio.unresolved),
    )
    return FixRun(content=content, audio=audio)


async def fix_files(fs: FileSystem, entries: list[Entry], settings: Settings) -> FixRun:
    """Run both fixes on an explicit list of files, in the same order as ``run_fix``."""
    fs, settings = _stage_dry_run(fs, settings)
    content_reports = [await fix_manual_content(fs, entry, settings) for entry in entries]
    audio_reports = [await fix_audio_clip(fs, entry, settings) for entry in entries]
    return FixRun(content=combine_reports(content_reports), audio=combine_reports(audio_reports))
