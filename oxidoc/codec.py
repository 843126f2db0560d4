"""Logic for the MessagePack encoding of records and of the global index."""

from __future__ import annotations

from typing import Any

import msgspec

from oxidoc.attributes import Attributes
from oxidoc.crate_info import CrateInfo
from oxidoc.doc_kind import DocKind
from oxidoc.documentation import PAYLOAD_TYPES, DocLink, Documentation, ImplContext
from oxidoc.qualified_path import QualifiedPath
from oxidoc.store_location import StoreLocation
from oxidoc.visibility import Visibility

INDEX_SCHEMA_VERSION = 1

# Deterministic key order keeps re-indexing byte-identical.
encoder = msgspec.msgpack.Encoder(order="deterministic")
decoder = msgspec.msgpack.Decoder()


def documentation_to_builtins(doc: Documentation) -> dict[str, Any]:
    """Convert a record into plain msgpack-able values."""
    return {
        "name": doc.name,
        "kind": doc.kind.value,
        "crate": doc.crate_info.name,
        "version": doc.crate_info.version,
        "mod_path": str(doc.mod_path),
        "visibility": doc.visibility.value,
        "doc_strings": list(doc.attrs.doc_strings),
        "inner": msgspec.to_builtins(doc.inner),
        "links": {
            kind.value: [{"name": link.name, "path": str(link.path)} for link in links]
            for kind, links in doc.links.items()
        },
        "impl_context": msgspec.to_builtins(doc.impl_context) if doc.impl_context else None,
    }


def documentation_from_builtins(data: dict[str, Any]) -> Documentation:
    """Rebuild a record from the output of documentation_to_builtins."""
    try:
        kind = DocKind(data["kind"])
        impl_context = data.get("impl_context")
        return Documentation(
            name=data["name"],
            kind=kind,
            crate_info=CrateInfo(data["crate"], data["version"]),
            mod_path=QualifiedPath.parse(data["mod_path"]),
            visibility=Visibility(data["visibility"]),
            attrs=Attributes(list(data.get("doc_strings", []))),
            inner=msgspec.convert(data["inner"], type=PAYLOAD_TYPES[kind]),
            links={
                DocKind(key): [DocLink(link["name"], QualifiedPath.parse(link["path"])) for link in links]
                for key, links in data.get("links", {}).items()
            },
            impl_context=msgspec.convert(impl_context, type=ImplContext) if impl_context else None,
        )
    except (KeyError, TypeError, ValueError, msgspec.ValidationError) as e:
        msg = f"Malformed documentation record: {e}"
        raise ValueError(msg) from e


def encode_documentation(doc: Documentation) -> bytes:
    return encoder.encode(documentation_to_builtins(doc))


def decode_documentation(raw: bytes) -> Documentation:
    """Decode a record file; raises ValueError on malformed content."""
    try:
        data = decoder.decode(raw)
    except msgspec.DecodeError as e:
        msg = f"Undecodable documentation record: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict):
        msg = "Documentation record is not a map"
        raise ValueError(msg)
    return documentation_from_builtins(data)


def location_to_builtins(location: StoreLocation) -> dict[str, str]:
    return {
        "crate": location.crate_info.name,
        "version": location.crate_info.version,
        "path": str(location.mod_path),
        "kind": location.kind.value,
        "name": location.name,
        "discriminator": location.discriminator,
    }


def location_from_builtins(data: dict[str, str]) -> StoreLocation:
    return StoreLocation(
        CrateInfo(data["crate"], data["version"]),
        QualifiedPath.parse(data["path"]),
        data["name"],
        DocKind(data["kind"]),
        data.get("discriminator", ""),
    )


def encode_index(locations: list[StoreLocation]) -> bytes:
    """Encode the global index, sorting locations for a stable byte form."""
    ordered = sorted(locations, key=StoreLocation.sort_key)
    return encoder.encode(
        {
            "schema_version": INDEX_SCHEMA_VERSION,
            "locations": [location_to_builtins(loc) for loc in ordered],
        }
    )


def decode_index(raw: bytes) -> list[StoreLocation]:
    """Decode the global index; raises ValueError when it is unusable."""
    try:
        data = decoder.decode(raw)
    except msgspec.DecodeError as e:
        msg = f"Undecodable store index: {e}"
        raise ValueError(msg) from e
    if not isinstance(data, dict):
        msg = "Store index is not a map"
        raise ValueError(msg)
    version = data.get("schema_version")
    if version != INDEX_SCHEMA_VERSION:
        msg = f"Unsupported store index schema version {version!r}"
        raise ValueError(msg)
    try:
        return [location_from_builtins(item) for item in data.get("locations", [])]
    except (KeyError, TypeError, ValueError) as e:
        msg = f"Malformed store index entry: {e}"
        raise ValueError(msg) from e
