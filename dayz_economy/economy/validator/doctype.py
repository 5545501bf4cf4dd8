"""Detect which economy file a document is, from its file name or root element."""

from __future__ import annotations

from pathlib import PurePath

from economy.validator.models import TagKind, TagToken

UNKNOWN = "unknown"

# Checked in order: the more specific names come first ("cfgspawnabletypes.xml"
# also ends in "types.xml").
FILENAME_KINDS: list[tuple[str, str]] = [
    ("cfgspawnabletypes", "spawnable"),
    ("cfgeconomycore", "economy"),
    ("cfgeventgroups", "eventgroups"),
    ("cfgeventspawns", "eventspawns"),
    ("cfgignorelist", "ignorelist"),
    ("cfgplayerspawnpoints", "spawnpoints"),
    ("cfgrandompresets", "randompresets"),
    ("cfgweather", "weather"),
    ("cfgenvironment", "environment"),
    ("cfglimitsdefinitionuser", "limitsdefinitionuser"),
    ("cfglimitsdefinition", "limitsdefinition"),
    ("mapgroupproto", "mapgroupproto"),
    ("mapgrouppos", "mapgrouppos"),
    ("mapgroupcluster", "mapgroupcluster"),
    ("globals.xml", "globals"),
    ("messages.xml", "messages"),
    ("events.xml", "events"),
    ("types.xml", "types"),
]

ROOT_KINDS: dict[str, str] = {
    "types": "types",
    "events": "events",
    "event": "events",
    "spawnabletypes": "spawnable",
    "economycore": "economy",
    "eventgroupdef": "eventgroups",
    "eventposdef": "eventspawns",
    "ignore": "ignorelist",
    "playerspawnpoints": "spawnpoints",
    "randompresets": "randompresets",
    "weather": "weather",
    "env": "environment",
    "variables": "globals",
    "messages": "messages",
    "prototype": "mapgroupproto",
    "map": "mapgrouppos",
    "lists": "limitsdefinition",
}


def detect_document_kind(tokens: list[TagToken], filename: str | None = None) -> str:
    """Return the document kind, preferring the file name over the root element."""
    if filename:
        lower = PurePath(filename).name.lower()
        for needle, kind in FILENAME_KINDS:
            if needle in lower:
                return kind

    for token in tokens:
        if token.kind != TagKind.closing:
            return ROOT_KINDS.get(token.name, UNKNOWN)
    return UNKNOWN
