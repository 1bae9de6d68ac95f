# utest/data_models/source_location.py
# SourceLocation data class and the caller-frame location provider.

import re
import traceback
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class SourceLocation:
    """
    Where a check was written.

    Fields:
      filename -- Source file of the calling frame.
      lineno   -- Line number of the call.
      text     -- Stripped source line, or empty string when unavailable
                  (interactive input, compiled-only modules).
    """
    filename: str
    lineno:   int
    text:     str


def caller_location(depth: int = 1) -> SourceLocation:
    """
    Return the location `depth` frames above the function calling this one.

    depth=1 is the caller of the function that invokes caller_location().
    """
    # extract_stack() lists frames oldest first; the last entry is this frame.
    frames = traceback.extract_stack(limit=depth + 2)
    frame = frames[0]
    return SourceLocation(
        filename=frame.filename,
        lineno=frame.lineno or 0,
        text=(frame.line or "").strip(),
    )


def call_argument_text(location: SourceLocation, func_name: str) -> Optional[str]:
    """
    Return the argument text of the call to `func_name` on the given line.

    `module.check(a < b)` yields `a < b`. If the call cannot be isolated on
    one line (multi-line call, name absent, unbalanced parentheses) None is
    returned.
    """
    line = location.text
    match = re.search(r"(?<!\w)" + re.escape(func_name) + r"\(", line)
    if match is None:
        return None
    begin = match.end()
    level = 1
    quote = ""
    for index in range(begin, len(line)):
        char = line[index]
        if quote:
            if char == quote and line[index - 1] != "\\":
                quote = ""
            continue
        if char in "'\"":
            quote = char
        elif char in "([{":
            level += 1
        elif char in ")]}":
            level -= 1
            if level == 0:
                return line[begin:index].strip()
    return None


def split_arguments(text: str) -> List[str]:
    """
    Split call argument text on top-level commas.

    Keyword arguments are dropped; only positional argument texts are kept.
    """
    parts = []
    level = 0
    quote = ""
    current = []
    for index, char in enumerate(text):
        if quote:
            if char == quote and text[index - 1] != "\\":
                quote = ""
        elif char in "'\"":
            quote = char
        elif char in "([{":
            level += 1
        elif char in ")]}":
            level -= 1
        elif char == "," and level == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if not _is_keyword_argument(part)]


def _is_keyword_argument(part: str) -> bool:
    name, sep, rest = part.partition("=")
    return bool(sep) and name.strip().isidentifier() and not rest.startswith("=")
