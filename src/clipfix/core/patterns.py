"""Lexical matchers for resource-playback calls.

Script text reaches the matchers in two encodings: raw ``.hx`` files hold literal
quotes and newlines, while code embedded in ``.entity`` documents is JSON-escaped
(``\\"`` and ``\\n``). Every matcher is assembled from small stages, each rendered
for an ``EscapeMode``:

    open -> whitespace -> argument -> whitespace -> [options] -> close -> ";"

``EscapeMode.ANY`` accepts both encodings and is what the rewriter runs against
raw file contents.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

DEFAULT_TARGET = "AudioClip.play"
CANONICAL_LOOKUP = "self.getResource().getContent"


class EscapeMode(str, Enum):
    LITERAL = "literal"
    ESCAPED = "escaped"
    ANY = "any"


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def whitespace(mode: EscapeMode) -> str:
    if mode is EscapeMode.LITERAL:
        return r"\s*"
    if mode is EscapeMode.ESCAPED:
        return r"(?:[ \t]|\\[rnt])*"
    return r"(?:\s|\\[rnt])*"


def quote(mode: EscapeMode) -> str:
    if mode is EscapeMode.LITERAL:
        return '"'
    if mode is EscapeMode.ESCAPED:
        return r'\\"'
    return r'\\?"'


def options_record(mode: EscapeMode) -> str:
    ws = whitespace(mode)
    return rf"(?:,{ws}\{{[^}}]*\}}{ws})?"


def call_open(target: str) -> str:
    return rf"{re.escape(target)}\("


def call_close(mode: EscapeMode) -> str:
    ws = whitespace(mode)
    return rf"{ws}{options_record(mode)}\){ws};"


def bare_literal(mode: EscapeMode) -> str:
    # No namespace separator, no nested quotes or escapes.
    q = quote(mode)
    return rf'{q}[^"\\:\r\n]*{q}'


def global_reference(mode: EscapeMode) -> str:
    q = quote(mode)
    return rf"(?:GlobalSfx\.\w+|{q}global::sfx\.\w+{q})"


def canonical_lookup(mode: EscapeMode) -> str:
    # Same literal body the rewrite produces, so rewritten calls count as correct.
    ws = whitespace(mode)
    return rf"self\.getResource\(\)\.getContent\({ws}{bare_literal(mode)}{ws}\)"


def _call(target: str, argument: str, mode: EscapeMode) -> str:
    return f"{call_open(target)}{whitespace(mode)}{argument}{call_close(mode)}"


# ---------------------------------------------------------------------------
# Matchers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CallMatcher:
    """Compiled matchers for one target call in one escape mode."""

    target: str
    mode: EscapeMode
    target_call: re.Pattern[str]
    exempt_global: re.Pattern[str]
    already_correct: re.Pattern[str]
    fixable: re.Pattern[str]

    def target_positions(self, text: str) -> list[int]:
        return [m.start() for m in self.target_call.finditer(text)]

    def is_exempt_at(self, text: str, pos: int = 0) -> bool:
        return self.exempt_global.match(text, pos) is not None

    def is_correct_at(self, text: str, pos: int = 0) -> bool:
        return self.already_correct.match(text, pos) is not None

    def is_fixable_at(self, text: str, pos: int = 0) -> bool:
        return self.fixable.match(text, pos) is not None

    def is_handled_at(self, text: str, pos: int = 0) -> bool:
        return self.is_exempt_at(text, pos) or self.is_fixable_at(text, pos) or self.is_correct_at(text, pos)

    def rewrite(self, text: str) -> tuple[str, int]:
        """Replace every fixable call with the canonical lookup form."""
        return self.fixable.subn(rf"\g<prefix>{CANONICAL_LOOKUP}(\g<literal>)\g<suffix>", text)


@lru_cache(maxsize=None)
def build_matcher(target: str = DEFAULT_TARGET, mode: EscapeMode = EscapeMode.ANY) -> CallMatcher:
    ws = whitespace(mode)
    fixable = (
        rf"(?P<prefix>{call_open(target)}{ws})"
        rf"(?P<literal>{bare_literal(mode)})"
        rf"(?P<suffix>{call_close(mode)})"
    )
    return CallMatcher(
        target=target,
        mode=mode,
        target_call=re.compile(rf"{re.escape(target)}(?!\w)"),
        exempt_global=re.compile(_call(target, global_reference(mode), mode)),
        already_correct=re.compile(_call(target, canonical_lookup(mode), mode)),
        fixable=re.compile(fixable),
    )


@lru_cache(maxsize=None)
def manual_content_pattern(mode: EscapeMode = EscapeMode.ANY) -> re.Pattern[str]:
    q = quote(mode)
    return re.compile(rf"(?P<open>{q})local::(?P<resource>\w+)\.(?P<content>\w+)(?P<close>{q})")


def rewrite_manual_content(text: str, mode: EscapeMode = EscapeMode.ANY) -> tuple[str, int, list[str]]:
    """Replace ``"local::RESOURCE.CONTENT"`` literals with the canonical lookup.

    The resource id is not part of the canonical form; the dropped ids are returned
    in match order so callers can report them.
    """
    dropped: list[str] = []

    def _replace(match: re.Match[str]) -> str:
        dropped.append(match.group("resource"))
        return f"{CANONICAL_LOOKUP}({match.group('open')}{match.group('content')}{match.group('close')})"

    new_text, count = manual_content_pattern(mode).subn(_replace, text)
    return new_text, count, dropped


# ---------------------------------------------------------------------------
# Predicates over the default target
# ---------------------------------------------------------------------------


def is_target_call(text: str) -> bool:
    return build_matcher().target_call.search(text) is not None


def is_exempt_global(text: str) -> bool:
    return build_matcher().exempt_global.search(text) is not None


def is_already_correct(text: str) -> bool:
    return build_matcher().already_correct.search(text) is not None


def is_fixable(text: str) -> re.Match[str] | None:
    """Return the fixable match (groups ``prefix``, ``literal``, ``suffix``) if any."""
    return build_matcher().fixable.search(text)


def is_manual_content_ref(text: str) -> re.Match[str] | None:
    return manual_content_pattern().search(text)


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------

_CONTROL_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    '"': '"',
    "\\": "\\",
}
_CONTROL_ESCAPE_RE = re.compile(r'\\([bfnrt"\\])')


def unescape_control_chars(text: str) -> str:
    """Turn two-character escapes back into the characters they stand for."""
    return _CONTROL_ESCAPE_RE.sub(lambda m: _CONTROL_ESCAPES[m.group(1)], text)
