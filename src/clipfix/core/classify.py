from dataclasses import dataclass, field

from clipfix.config import Settings
from clipfix.core.extract import extract_locations
from clipfix.core.patterns import CallMatcher, EscapeMode, build_matcher
from clipfix.core.ports.filesystem import FileSystem
from clipfix.models import CodeLocation, Entry, UnresolvedMatch


@dataclass
class Classification:
    """Tally of the target calls found in a piece of script text."""

    exempt: int = 0
    fixable: int = 0
    correct: int = 0
    unresolved: list[tuple[int, str]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.exempt + self.fixable + self.correct + len(self.unresolved)


def classify_text(text: str, matcher: CallMatcher, first_per_line: bool = False) -> Classification:
    """Classify every target call in ``text``.

    Unresolved calls are recorded as ``(line_number, line)`` with 1-based line numbers.
    With ``first_per_line`` a line contributes at most one unresolved entry and the
    rest of that line is not inspected.

    A fixable call wrapped over several lines is matched against the whole text,
    because the rewrite fixes it the same way. A trailing ``\\r`` is not part of
    the recorded line.
    """
    result = Classification()
    fixable_starts = {m.start() for m in matcher.fixable.finditer(text)}
    offset = 0
    for line_no, raw_line in enumerate(text.split("\n"), start=1):
        line = raw_line.removesuffix("\r")
        line_start = offset
        offset += len(raw_line) + 1
        for pos in matcher.target_positions(line):
            if matcher.is_exempt_at(line, pos):
                result.exempt += 1
            elif line_start + pos in fixable_starts or matcher.is_fixable_at(line, pos):
                result.fixable += 1
            elif matcher.is_correct_at(line, pos):
                result.correct += 1
            else:
                result.unresolved.append((line_no, line))
                if first_per_line:
                    break
    return result


def unresolved_in_locations(
    locations: list[CodeLocation], matcher: CallMatcher, first_per_line: bool = False
) -> list[UnresolvedMatch]:
    matches: list[UnresolvedMatch] = []
    for location in locations:
        classification = classify_text(location.text, matcher, first_per_line)
        for line_no, line in classification.unresolved:
            matches.append(UnresolvedMatch(location=f"{location.label} line {line_no}", line=line))
    return matches


async def find_unresolved(fs: FileSystem, entry: Entry, settings: Settings) -> list[UnresolvedMatch]:
    if not settings.is_eligible(entry.name):
        return []
    locations = await extract_locations(fs, entry, settings)
    matcher = build_matcher(settings.target_call, EscapeMode.ANY)
    return unresolved_in_locations(locations, matcher, settings.first_unresolved_per_line)
