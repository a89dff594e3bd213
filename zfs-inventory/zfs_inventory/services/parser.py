"""
Parsers for `zfs get -H` output.

Two line shapes are handled:
- `name<TAB>property<TAB>value` from a multi-dataset query (`-o name,property,value`)
- `property<TAB>value` from a single-dataset query (`-o property,value`)

Property values are copied onto record fields through PROPERTY_FIELDS.
Properties with no entry there, or with no matching field on the record
type, are ignored so newer zfs releases can report more properties.
"""

import re
from typing import Callable, Dict, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from zfs_inventory.exceptions import ZFSParseError

Record = TypeVar("Record", bound=BaseModel)

_INTEGER = re.compile(r"[+-]?[0-9]+")


def _to_int(value: str) -> int:
    # ASCII base-10 with optional sign; int() alone also accepts "1_000" and non-ASCII digits
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"invalid integer {value!r}")
    return int(value, 10)


# zfs property -> (record field, converter)
PROPERTY_FIELDS: Dict[str, Tuple[str, Callable[[str], object]]] = {
    "name": ("name", str),
    "guid": ("guid", str),
    "origin": ("origin", str),
    "createtxg": ("createtxg", _to_int),
}


def _decode(data: Union[bytes, str]) -> str:
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def apply_property(record: BaseModel, prop: str, value: str, raw_line: Optional[str] = None) -> None:
    """Set the field mapped to `prop` on `record`, ignoring unknown properties."""
    mapping = PROPERTY_FIELDS.get(prop)
    if mapping is None:
        return
    field, convert = mapping
    if field not in type(record).model_fields:
        return
    try:
        converted = convert(value)
    except ValueError as e:
        raise ZFSParseError(
            f"unable to convert {prop} value {value!r}: {e}",
            raw_line=raw_line,
            dataset=getattr(record, "name", None) or None,
        ) from e
    setattr(record, field, converted)


def parse_property_stream(data: Union[bytes, str], record_type: Type[Record]) -> Dict[str, Record]:
    """Parse `name<TAB>property<TAB>value` lines into records keyed by name.

    The first line for a name creates the record, later lines for the same
    name update it in place. Line order doesn't matter otherwise.
    """
    records: Dict[str, Record] = {}
    for line in _decode(data).splitlines():
        if not line.strip():
            continue
        parts = line.split("\t", 2)
        if len(parts) != 3:
            raise ZFSParseError("expected name, property and value columns", raw_line=line)
        name, prop, value = parts

        record = records.get(name)
        if record is None:
            record = record_type(name=name)
            records[name] = record

        apply_property(record, prop, value, raw_line=line)
    return records


def parse_property_record(data: Union[bytes, str], record_type: Type[Record]) -> Record:
    """Parse `property<TAB>value` lines of a single dataset into one record."""
    record = record_type()
    for line in _decode(data).splitlines():
        if not line.strip():
            continue
        parts = line.split("\t", 1)
        if len(parts) != 2:
            raise ZFSParseError("expected property and value columns", raw_line=line)
        prop, value = parts
        apply_property(record, prop, value, raw_line=line)
    return record
