"""Derive folder (group) and file names for OpenAPI operations.

Group name, first match wins:
  1. first tag, verbatim                     tags=["Pet Store"] -> Pet Store
  2. operationId 'XxxController_...'         UsersController_findAll -> Users
  3. first non-parameter path segment        /orders/{id} -> Orders
  4. 'General'

File name, first match wins:
  1. self-describing 'Word-Word' segment     /Get-Event-Detail/{id} -> Get-Event-Detail
  2. operationId                             listPets -> ListPets
  3. method + segments [+ -By + params]      GET /users/{userId} -> Get-Users-ByUserId
  4. '<Method>-Request'                      GET / -> Get-Request
"""

from __future__ import annotations

import re

DEFAULT_GROUP = "General"

_INVALID_CHARS = re.compile(r"[^\w\s-]")
_WORD_SPLIT = re.compile(r"[-_\s]+")
_CONTROLLER_ID = re.compile(r"^([A-Za-z0-9]+)Controller_")
# Capitalized words only: /Get-Event-Detail/ matches, /user-profiles/ does not
_SELF_DESCRIBING = re.compile(r"(?:^|/)([A-Z][A-Za-z0-9]*(?:-[A-Z][A-Za-z0-9]*)+-*)(?=/|\{|$)")
_PARAM_SEGMENT = re.compile(r"\{([^}]*)\}")


def _split_camel(chunk: str) -> list[str]:
    """Split camelCase and PascalCase runs: 'HTTPServerId' -> ['HTTP', 'Server', 'Id'].

    A word starts at an upper-case letter that follows a non-upper-case
    character, or at the last capital of a run when more text follows it.
    """
    words, start = [], 0
    for i in range(1, len(chunk)):
        ch, prev = chunk[i], chunk[i - 1]
        nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
        if ch.isupper() and (not prev.isupper() or (nxt and not nxt.isupper())):
            words.append(chunk[start:i])
            start = i
    words.append(chunk[start:])
    return [w for w in words if w]


def _merge_single_letters(words: list[str]) -> list[str]:
    """Join runs of one-character words: ['get', 'a', 'b'] -> ['get', 'ab']."""
    merged: list[str] = []
    in_run = False
    for word in words:
        if len(word) == 1 and in_run:
            merged[-1] += word
        else:
            merged.append(word)
            in_run = len(word) == 1
    return merged


def sanitize(name: str) -> str:
    """Turn an arbitrary string into a PascalCase identifier.

    'get_user-by id' -> 'GetUserById', 'userId' -> 'UserId', 'a b' -> 'Ab'.
    Idempotent: every output word splits back into itself.
    """
    name = _INVALID_CHARS.sub("", name or "")
    name = re.sub(r"\s+", " ", name)
    words = []
    for chunk in _WORD_SPLIT.split(name):
        words.extend(_split_camel(chunk))
    return "".join(w[:1].upper() + w[1:].lower() for w in _merge_single_letters(words))


def _segments(path: str) -> list[str]:
    return [s for s in path.split("/") if s]


def _literal_segments(path: str) -> list[str]:
    """Path segments that are not '{param}' placeholders."""
    return [s for s in _segments(path) if not s.startswith("{")]


def path_params(path: str) -> list[str]:
    """Names of all '{param}' placeholders in a path template, in order."""
    return [m for m in _PARAM_SEGMENT.findall(path) if m]


def resolve_group_name(path: str, tags: list[str] | None = None, operation_id: str | None = None) -> str:
    """Pick the folder an operation belongs to."""
    if tags and tags[0].strip():
        return tags[0]

    if operation_id:
        match = _CONTROLLER_ID.match(operation_id)
        if match and sanitize(match.group(1)):
            return sanitize(match.group(1))

    for segment in _literal_segments(path):
        name = sanitize(segment)
        if name:
            return name

    return DEFAULT_GROUP


def resolve_file_name(method: str, path: str, operation_id: str | None = None) -> str:
    """Pick the file (and display) name of an operation."""
    for match in _SELF_DESCRIBING.finditer(path):
        name = re.sub(r"[^A-Za-z0-9-]", "", match.group(1)).rstrip("-")
        if name:
            return name

    if operation_id:
        name = sanitize(operation_id)
        if name:
            return name

    verb = method.lower().capitalize()
    parts = [p for p in (sanitize(s) for s in _literal_segments(path)) if p]
    if not parts:
        return f"{verb}-Request"

    name = f"{verb}-" + "-".join(parts)
    params = [p for p in (sanitize(n) for n in path_params(path)) if p]
    if params:
        name += "-By" + "-".join(params)
    return name
