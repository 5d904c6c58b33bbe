# quietus/registry.py
"""
Organization registry parsing.

The registry is a flat UTF-8 text file with one organization per line:

    Acme, https://acme.example/rss

No header, no quoting. Registry order is preserved and duplicates are kept.
"""
from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from quietus.errors import InvalidArgumentError, NotFoundError, ParseError, RegistryReadError
from quietus.schemas import Organization

DELIMITER = ","


def parse_registry_line(line: str, line_number: int) -> Organization:
    """
    Convert one registry line into an Organization.

    Rules:
    - fields are split on the first two commas; anything after the URL is ignored
    - whitespace around the URL is trimmed; the name is kept as written
    - fewer than two fields, a blank name or a non-absolute URL -> ParseError
    """
    pieces = line.split(DELIMITER)
    if len(pieces) < 2:
        raise ParseError(
            f"registry line {line_number}: expected 'name,feed_url', got {line.strip()!r}",
            line_number=line_number,
        )

    name = pieces[0]
    feed_url = pieces[1].strip()
    if not name.strip():
        raise ParseError(f"registry line {line_number}: name is blank", line_number=line_number)

    try:
        return Organization(name=name, feed_url=feed_url, line_number=line_number)
    except ValidationError as exc:
        raise ParseError(
            f"registry line {line_number}: invalid entry {line.strip()!r}",
            line_number=line_number,
        ) from exc


def load_registry(path: str | Path | None) -> list[Organization]:
    """Read the registry at `path` into Organizations, skipping blank lines."""
    if path is None or not str(path).strip():
        raise InvalidArgumentError("registry path is required")

    registry = Path(path)
    if not registry.is_file():
        raise NotFoundError(f"registry file not found: {registry}")

    organizations: list[Organization] = []
    try:
        with registry.open("rb") as fh:
            for line_number, raw in enumerate(fh, start=1):
                try:
                    line = raw.decode("utf-8-sig" if line_number == 1 else "utf-8")
                except UnicodeDecodeError as exc:
                    raise ParseError(
                        f"registry line {line_number}: not valid UTF-8",
                        line_number=line_number,
                    ) from exc
                if not line.strip():
                    continue
                organizations.append(parse_registry_line(line, line_number))
    except OSError as exc:
        raise RegistryReadError(f"registry file cannot be read: {registry}: {exc}") from exc

    return organizations
