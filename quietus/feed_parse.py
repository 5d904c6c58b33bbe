# quietus/feed_parse.py
from __future__ import annotations

import html.entities
import re
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from xml.parsers import expat

from quietus.config import DEFAULT_MAX_ENTITY_CHARS
from quietus.errors import FeedParseError
from quietus.schemas import FeedDocument, FeedItem

ATOM_NS = "http://www.w3.org/2005/Atom"
RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RSS1_NS = "http://purl.org/rss/1.0/"
RSS090_NS = "http://my.netscape.com/rdf/simple/0.9/"
DC_NS = "http://purl.org/dc/elements/1.1/"
DCTERMS_NS = "http://purl.org/dc/terms/"

_ENTITY_REF = re.compile(r"&([A-Za-z_:][\w.:-]*);")


class _EntityBudgetExceeded(Exception):
    pass


def check_entity_budget(body: bytes | str, *, max_chars: int = DEFAULT_MAX_ENTITY_CHARS) -> int:
    """
    Count the characters that internal entity substitution would produce.

    DTDs and internal entities are allowed; the total expansion across the
    document may not exceed `max_chars`. Returns the total, raises
    FeedParseError when the budget is exceeded or the XML is malformed.
    Entity references inside attribute values are expanded by expat before
    they can be counted and are left to expat's own amplification limit.
    """
    declared: dict[str, str] = {}
    lengths: dict[str, int] = {}
    produced = 0

    def expanded_length(name: str, resolving: frozenset[str] = frozenset()) -> int:
        if name in lengths:
            return lengths[name]
        if name in resolving:
            raise FeedParseError(f"RSS_PARSE_FAIL: recursive entity &{name};")
        value = declared[name]
        total = len(_ENTITY_REF.sub("", value))
        for ref in _ENTITY_REF.findall(value):
            if ref in declared:
                total += expanded_length(ref, resolving | {name})
        lengths[name] = total
        return total

    def on_entity_decl(name, is_parameter_entity, value, base, system_id, public_id, notation_name):
        # external and parameter entities are never substituted into content
        if is_parameter_entity or value is None:
            return
        declared.setdefault(name, value)

    def on_default(data):
        nonlocal produced
        match = _ENTITY_REF.fullmatch(data)
        if match is None or match.group(1) not in declared:
            return
        produced += expanded_length(match.group(1))
        if produced > max_chars:
            raise _EntityBudgetExceeded()

    parser = expat.ParserCreate()
    parser.EntityDeclHandler = on_entity_decl
    # DefaultHandler (not DefaultHandlerExpand) reports references unexpanded
    parser.DefaultHandler = on_default

    try:
        parser.Parse(body, True)
    except _EntityBudgetExceeded as exc:
        raise FeedParseError(
            f"RSS_PARSE_FAIL: entity expansion exceeds {max_chars} characters"
        ) from exc
    except expat.ExpatError as exc:
        raise FeedParseError(f"RSS_PARSE_FAIL: malformed XML: {exc}") from exc

    return produced


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 822 or ISO 8601 date. Unparsable or missing -> None; naive -> UTC."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    iso = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.fromisoformat(iso)
    except ValueError:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError, IndexError):
            return None
        if parsed is None:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _text_of(elem: ET.Element | None, *paths: str) -> str | None:
    """First non-empty text among `paths` under `elem`."""
    if elem is None:
        return None
    for path in paths:
        found = elem.find(path)
        if found is None:
            continue
        text = "".join(found.itertext()).strip()
        if text:
            return text
    return None


def _rss_items(channel: ET.Element) -> list[FeedItem]:
    out: list[FeedItem] = []
    for it in channel.findall("item"):
        out.append(
            FeedItem(
                title=_text_of(it, "title") or "",
                published=parse_timestamp(_text_of(it, "pubDate")),
                updated=parse_timestamp(_text_of(it, f"{{{ATOM_NS}}}updated", f"{{{DC_NS}}}date")),
            )
        )
    return out


def _rdf_items(root: ET.Element, ns: str) -> list[FeedItem]:
    out: list[FeedItem] = []
    for it in root.findall(f"{{{ns}}}item"):
        out.append(
            FeedItem(
                title=_text_of(it, f"{{{ns}}}title") or "",
                published=parse_timestamp(_text_of(it, f"{{{DCTERMS_NS}}}issued")),
                updated=parse_timestamp(_text_of(it, f"{{{DC_NS}}}date", f"{{{DCTERMS_NS}}}modified")),
            )
        )
    return out


def _atom_items(root: ET.Element) -> list[FeedItem]:
    out: list[FeedItem] = []
    for entry in root.findall(f"{{{ATOM_NS}}}entry"):
        out.append(
            FeedItem(
                title=_text_of(entry, f"{{{ATOM_NS}}}title") or "",
                published=parse_timestamp(_text_of(entry, f"{{{ATOM_NS}}}published")),
                updated=parse_timestamp(_text_of(entry, f"{{{ATOM_NS}}}updated")),
            )
        )
    return out


def parse_feed(body: bytes | str, *, max_entity_chars: int = DEFAULT_MAX_ENTITY_CHARS) -> FeedDocument:
    """
    Convert an RSS 2.0, RSS 1.0 (RDF) or Atom document into a FeedDocument.

    Rules:
    - items keep document order
    - "published" comes from pubDate / dcterms:issued / atom:published
    - "updated" comes from atom:updated or dc:date (RSS), dc:date or
      dcterms:modified (RDF), atom:updated (Atom)
    - a date that cannot be parsed is left as None
    - malformed XML, entity budget overrun, unknown root -> FeedParseError
    """
    check_entity_budget(body, max_chars=max_entity_chars)

    # HTML named entities declared by an external DTD (RSS 0.91) are never
    # fetched; map them locally so such feeds still parse.
    parser = ET.XMLParser()
    parser.entity.update(html.entities.entitydefs)
    try:
        root = ET.fromstring(body, parser=parser)
    except ET.ParseError as exc:
        raise FeedParseError(f"RSS_PARSE_FAIL: malformed XML: {exc}") from exc

    if root.tag == "rss":
        channel = root.find("channel")
        if channel is None:
            raise FeedParseError("RSS_PARSE_FAIL: <rss> without <channel>")
        return FeedDocument(format="rss", title=_text_of(channel, "title") or "", items=_rss_items(channel))

    if root.tag == f"{{{RDF_NS}}}RDF":
        ns = RSS1_NS if root.find(f"{{{RSS1_NS}}}channel") is not None else RSS090_NS
        channel = root.find(f"{{{ns}}}channel")
        return FeedDocument(
            format="rdf",
            title=_text_of(channel, f"{{{ns}}}title") or "",
            items=_rdf_items(root, ns),
        )

    if root.tag == f"{{{ATOM_NS}}}feed":
        return FeedDocument(format="atom", title=_text_of(root, f"{{{ATOM_NS}}}title") or "", items=_atom_items(root))

    raise FeedParseError(f"RSS_PARSE_FAIL: not a syndication feed (root element {root.tag!r})")
