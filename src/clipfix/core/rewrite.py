"""In-place rewrites of raw (still escaped) file contents."""

import logging

from clipfix.config import Settings
from clipfix.core.classify import find_unresolved
from clipfix.core.patterns import EscapeMode, build_matcher, rewrite_manual_content
from clipfix.core.ports.filesystem import FileSystem
from clipfix.models import Entry, MatchReport

logger = logging.getLogger(__name__)


async def fix_audio_clip(fs: FileSystem, entry: Entry, settings: Settings) -> MatchReport:
    """Rewrite fixable target calls and report the calls that need a human.

    Every file in the tree is rewritten. Only scripts and entities are classified,
    and files that do not decode as text (images, audio) are skipped.
    """
    unresolved = await find_unresolved(fs, entry, settings)
    try:
        contents = await fs.read_text(entry)
    except UnicodeDecodeError:
        if settings.is_eligible(entry.name):
            raise
        logger.debug("Skipping non-text file %s", entry.path)
        return MatchReport(path=entry.path)

    matcher = build_matcher(settings.target_call, EscapeMode.ANY)
    new_contents, fixed = matcher.rewrite(contents)
    if fixed > 0:
        logger.info(
            "Found %d incorrect calls of the form %s(\"id\", ...) in %s", fixed, settings.target_call, entry.name
        )
        if not settings.dry_run:
            await fs.write_text(entry, new_contents)
    return MatchReport(path=entry.path, unresolved=unresolved, fixed=fixed)


async def fix_manual_content(fs: FileSystem, entry: Entry, settings: Settings) -> MatchReport:
    """Rewrite ``"local::RESOURCE.CONTENT"`` literals to the canonical content lookup."""
    if not settings.is_eligible(entry.name):
        return MatchReport(path=entry.path)

    contents = await fs.read_text(entry)
    new_contents, fixed, dropped = rewrite_manual_content(contents)
    if fixed > 0:
        logger.info("Found %d incorrect content strings in %s", fixed, entry.name)
        for resource_id in sorted(set(dropped)):
            logger.warning("Dropped resource id %r from a content reference in %s", resource_id, entry.name)
        if not settings.dry_run:
            await fs.write_text(entry, new_contents)
    return MatchReport(path=entry.path, fixed=fixed, dropped_resource_ids=dropped)
