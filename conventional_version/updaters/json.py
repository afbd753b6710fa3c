"""Updater for JSON manifests (package.json, bower.json, package-lock.json...).

The file is re-serialised after the edit, so the indentation and newline
style are detected from the original text and reproduced.
"""

from __future__ import annotations

import json
import re
from collections import Counter
from typing import Any

_LEADING_WS = re.compile(r"^[ \t]*")


def detect_indent(contents: str) -> str:
    """Return the indentation unit used in ``contents``.

    The unit is the most common increase in leading whitespace between
    consecutive non-blank lines, e.g. "  ", "    " or "\\t". Minified JSON
    yields "".
    """
    steps: Counter[str] = Counter()
    previous = 0
    for line in contents.splitlines():
        if not line.strip():
            continue
        ws = _LEADING_WS.match(line).group(0)
        if len(ws) > previous:
            steps[ws[0] * (len(ws) - previous)] += 1
        previous = len(ws)
    if not steps:
        return ""
    return steps.most_common(1)[0][0]


def detect_newline(contents: str) -> str:
    """Return "\\r\\n" when CRLF line endings dominate, else "\\n"."""
    crlf = contents.count("\r\n")
    lf = contents.count("\n") - crlf
    return "\r\n" if crlf > lf else "\n"


def _load(contents: str) -> dict[str, Any]:
    data = json.loads(contents)
    if not isinstance(data, dict):
        raise ValueError("expected a JSON object")
    return data


def read_version(contents: str) -> str | None:
    return _load(contents).get("version")


def write_version(contents: str, version: str) -> str:
    """Set ``version`` and return the re-serialised document.

    package-lock.json v2+ also records the root package version under
    ``packages[""]``; it is kept in sync.
    """
    data = _load(contents)
    indent = detect_indent(contents) or "  "
    newline = detect_newline(contents)

    data["version"] = version
    packages = data.get("packages")
    if isinstance(packages, dict) and isinstance(packages.get(""), dict):
        packages[""]["version"] = version

    text = json.dumps(data, indent=indent, ensure_ascii=False)
    return text.replace("\n", newline) + newline


def is_private(contents: str) -> bool:
    return _load(contents).get("private") is True
