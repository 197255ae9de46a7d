"""Encode and decode Claude project paths to and from directory names.

Claude Code stores each project's transcripts under
``~/.claude/projects/<encoded>``, where ``<encoded>`` is the absolute project
path with every ``/`` replaced by ``-``. The mapping is lossy: a project path
that itself contains ``-`` cannot be recovered from the directory name, so
callers should prefer the ``cwd`` recorded inside a transcript and only fall
back to :func:`decode_project_path`.
"""

from __future__ import annotations

SEPARATOR = "/"
SUBSTITUTE = "-"


def encode_project_path(path: str) -> str:
    """Encode '/Users/foo/src/myproject' -> '-Users-foo-src-myproject'."""
    return path.replace(SEPARATOR, SUBSTITUTE)


def decode_project_path(encoded: str) -> str:
    """Decode '-Users-foo-src-myproject' -> '/Users/foo/src/myproject'."""
    if not encoded:
        return ""
    return encoded.replace(SUBSTITUTE, SEPARATOR)


def project_name_from_path(project_path: str) -> str:
    """Extract a human-readable project name from a project path."""
    if not project_path:
        return "Unknown"
    parts = project_path.rstrip(SEPARATOR).split(SEPARATOR)
    return parts[-1] or "Unknown"
