from __future__ import annotations

from flakeid.clock import ClockSource, system_clock_ms
from flakeid.errors import ClockMovedBackwardsError, IdGenError, InvalidNodeIdError
from flakeid.generator import SnowflakeGenerator, generate_id, get_generator, reset_generators
from flakeid.layout import (
    DATACENTER_ID_BITS,
    EPOCH_MS,
    MACHINE_ID_BITS,
    SEQUENCE_BITS,
    TIMESTAMP_BITS,
    UNUSED_BITS,
    DecodedId,
    decode,
    format_id,
)

__all__ = [
    "ClockMovedBackwardsError",
    "ClockSource",
    "DATACENTER_ID_BITS",
    "DecodedId",
    "EPOCH_MS",
    "IdGenError",
    "InvalidNodeIdError",
    "MACHINE_ID_BITS",
    "SEQUENCE_BITS",
    "SnowflakeGenerator",
    "TIMESTAMP_BITS",
    "UNUSED_BITS",
    "decode",
    "format_id",
    "generate_id",
    "get_generator",
    "reset_generators",
    "system_clock_ms",
]
