from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any, Dict, Optional

EPOCH_MS = 1_577_836_800_000  # 2020-01-01T00:00:00Z

UNUSED_BITS = 1
TIMESTAMP_BITS = 41
DATACENTER_ID_BITS = 5
MACHINE_ID_BITS = 5
SEQUENCE_BITS = 12

MAX_DATACENTER_ID = (1 << DATACENTER_ID_BITS) - 1
MAX_MACHINE_ID = (1 << MACHINE_ID_BITS) - 1
MAX_SEQUENCE = (1 << SEQUENCE_BITS) - 1
TIMESTAMP_MASK = (1 << TIMESTAMP_BITS) - 1

MACHINE_ID_SHIFT = SEQUENCE_BITS
DATACENTER_ID_SHIFT = MACHINE_ID_SHIFT + MACHINE_ID_BITS
TIMESTAMP_SHIFT = DATACENTER_ID_SHIFT + DATACENTER_ID_BITS

ID_MASK = (1 << 64) - 1

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

FORMAT_TEMPLATE = "{stamp}, #{sequence}, @({datacenter_id}, {machine_id})"


@dataclass(frozen=True)
class DecodedId:
    timestamp_ms: int
    datacenter_id: int
    machine_id: int
    sequence: int

    @property
    def created_at(self) -> datetime:
        return UNIX_EPOCH + timedelta(milliseconds=self.timestamp_ms)

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def compose(timestamp_ms: int, datacenter_id: int, machine_id: int, sequence: int) -> int:
    """Pack raw Unix milliseconds and node fields into a 64-bit id.

    Offsets past the 41-bit range wrap; that is the layout's lifetime limit.
    """
    offset = (timestamp_ms - EPOCH_MS) & TIMESTAMP_MASK
    return (
        offset << TIMESTAMP_SHIFT
        | datacenter_id << DATACENTER_ID_SHIFT
        | machine_id << MACHINE_ID_SHIFT
        | sequence
    )


def decode(snowflake_id: int) -> DecodedId:
    """Split an id back into its fields.

    Any integer decodes. Only the low 64 bits are read and the sign margin is
    ignored, so ids not minted here come back as whatever their bits say.
    """
    value = int(snowflake_id) & ID_MASK
    return DecodedId(
        timestamp_ms=((value >> TIMESTAMP_SHIFT) & TIMESTAMP_MASK) + EPOCH_MS,
        datacenter_id=(value >> DATACENTER_ID_SHIFT) & MAX_DATACENTER_ID,
        machine_id=(value >> MACHINE_ID_SHIFT) & MAX_MACHINE_ID,
        sequence=value & MAX_SEQUENCE,
    )


def format_id(snowflake_id: int, tz: Optional[tzinfo] = None) -> str:
    decoded = decode(snowflake_id)
    moment = decoded.created_at.astimezone(tz or timezone.utc)
    stamp = moment.strftime("%Y-%m-%d %H:%M:%S") + f".{moment.microsecond // 1000:03d}"
    return FORMAT_TEMPLATE.format(
        stamp=stamp,
        sequence=decoded.sequence,
        datacenter_id=decoded.datacenter_id,
        machine_id=decoded.machine_id,
    )


def layout_parameters() -> Dict[str, Any]:
    return {
        "EPOCH": EPOCH_MS,
        "UNUSED_BITS": UNUSED_BITS,
        "TIMESTAMP_BITS": TIMESTAMP_BITS,
        "DATA_CENTER_ID_BITS": DATACENTER_ID_BITS,
        "MACHINE_ID_BITS": MACHINE_ID_BITS,
        "SEQUENCE_BITS": SEQUENCE_BITS,
        "MAX_DATA_CENTER_NUM": MAX_DATACENTER_ID,
        "MAX_MACHINE_NUM": MAX_MACHINE_ID,
        "MAX_SEQUENCE": MAX_SEQUENCE,
        "MACHINE_ID_SHIFT": MACHINE_ID_SHIFT,
        "DATA_CENTER_ID_SHIFT": DATACENTER_ID_SHIFT,
        "TIMESTAMP_SHIFT": TIMESTAMP_SHIFT,
    }
