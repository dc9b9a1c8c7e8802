from __future__ import annotations

import logging
import threading
import time
from datetime import tzinfo
from typing import Any, ClassVar, Dict, Optional, Tuple

from . import layout
from .clock import ClockSource, system_clock_ms
from .config import get_settings
from .errors import ClockMovedBackwardsError, InvalidNodeIdError

logger = logging.getLogger(__name__)


def _validate_node_field(field: str, value: object, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise InvalidNodeIdError(field, value, maximum)
    return value


class SnowflakeGenerator:
    """Generate sortable 64-bit ids for one (datacenter, machine) node.

    Layout, high bit first: 1 unused bit, 41 bits of milliseconds since
    2020-01-01 UTC, 5 bits datacenter id, 5 bits machine id, 12 bits sequence.
    """

    _spin_interval: ClassVar[float] = 0.0001

    def __init__(self, datacenter_id: int, machine_id: int, *, clock: ClockSource = system_clock_ms) -> None:
        self._datacenter_id = _validate_node_field("datacenter_id", datacenter_id, layout.MAX_DATACENTER_ID)
        self._machine_id = _validate_node_field("machine_id", machine_id, layout.MAX_MACHINE_ID)
        self._clock = clock
        self._lock = threading.Lock()
        # raw unix milliseconds; the epoch offset only applies when packing
        self._last_ts = -1
        self._sequence = 0
        logger.debug(
            "idgen: generator created",
            extra={"datacenter_id": self._datacenter_id, "machine_id": self._machine_id},
        )

    @property
    def datacenter_id(self) -> int:
        return self._datacenter_id

    @property
    def machine_id(self) -> int:
        return self._machine_id

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def last_timestamp(self) -> int:
        return self._last_ts

    def mint(self) -> int:
        with self._lock:
            ts = self._clock()
            if ts < self._last_ts:
                logger.warning(
                    "idgen: clock moved backwards from %s to %s",
                    self._last_ts,
                    ts,
                    extra={"datacenter_id": self._datacenter_id, "machine_id": self._machine_id},
                )
                raise ClockMovedBackwardsError(self._last_ts, ts)

            if ts == self._last_ts:
                self._sequence = (self._sequence + 1) & layout.MAX_SEQUENCE
                if self._sequence == 0:
                    ts = self._wait_next(self._last_ts)
            else:
                self._sequence = 0

            self._last_ts = ts
            return layout.compose(ts, self._datacenter_id, self._machine_id, self._sequence)

    next_id = mint

    def __call__(self) -> int:
        return self.mint()

    def _wait_next(self, last_ts: int) -> int:
        logger.debug("idgen: sequence exhausted at %s, waiting for next millisecond", last_ts)
        ts = self._clock()
        while ts <= last_ts:
            time.sleep(self._spin_interval)
            ts = self._clock()
        return ts

    @staticmethod
    def decode(snowflake_id: int) -> layout.DecodedId:
        return layout.decode(snowflake_id)

    @staticmethod
    def format(snowflake_id: int, tz: Optional[tzinfo] = None) -> str:
        return layout.format_id(snowflake_id, tz)

    def describe(self) -> Dict[str, Any]:
        with self._lock:
            state = {
                "datacenter_id": self._datacenter_id,
                "machine_id": self._machine_id,
                "sequence": self._sequence,
                "last_timestamp": self._last_ts,
            }
        return {**layout.layout_parameters(), **state}

    def __repr__(self) -> str:
        return f"SnowflakeGenerator(datacenter_id={self._datacenter_id}, machine_id={self._machine_id})"


_GLOBAL_GENERATORS: Dict[Tuple[int, int], SnowflakeGenerator] = {}
_REGISTRY_LOCK = threading.Lock()


def get_generator(datacenter_id: Optional[int] = None, machine_id: Optional[int] = None) -> SnowflakeGenerator:
    if datacenter_id is None or machine_id is None:
        settings = get_settings()
        if datacenter_id is None:
            datacenter_id = settings.datacenter_id
        if machine_id is None:
            machine_id = settings.machine_id
    key = (
        _validate_node_field("datacenter_id", datacenter_id, layout.MAX_DATACENTER_ID),
        _validate_node_field("machine_id", machine_id, layout.MAX_MACHINE_ID),
    )
    with _REGISTRY_LOCK:
        generator = _GLOBAL_GENERATORS.get(key)
        if generator is None:
            generator = SnowflakeGenerator(*key)
            _GLOBAL_GENERATORS[key] = generator
    return generator


def generate_id(datacenter_id: Optional[int] = None, machine_id: Optional[int] = None) -> int:
    return get_generator(datacenter_id, machine_id).mint()


def reset_generators() -> None:
    with _REGISTRY_LOCK:
        _GLOBAL_GENERATORS.clear()
