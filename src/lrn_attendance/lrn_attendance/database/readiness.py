from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Callable

from ..core.constants import ATTENDANCE_SCHEMA_TOKEN
from ..core.exceptions import SchemaObjectMissing, StorageError
from .gateway import StorageGateway

logger = logging.getLogger(__name__)


def attendance_table_probe(gateway: StorageGateway) -> Callable[[], bool]:
    """Build a probe that reports whether the attendance table is reachable."""

    def probe() -> bool:
        try:
            gateway.query("attendance", limit=0)
        except SchemaObjectMissing:
            logger.warning("Attendance table does not exist; run database/schema.sql first")
            return False
        except StorageError as e:
            logger.warning("Error checking attendance table: %s", e)
            return False
        return True

    return probe


class SchemaReadiness:
    """Idempotent, single-flight schema check.

    Concurrent callers share one in-flight probe through a Future keyed by
    the readiness token. A successful probe is remembered; a failed one is
    not, so the next call probes again.
    """

    def __init__(self, probe: Callable[[], bool], *, token: str = ATTENDANCE_SCHEMA_TOKEN):
        self._probe = probe
        self._token = token
        self._lock = threading.Lock()
        self._ready = False
        self._inflight: dict[str, Future] = {}

    @property
    def is_ready(self) -> bool:
        return self._ready

    def ensure_ready(self) -> bool:
        with self._lock:
            if self._ready:
                return True
            future = self._inflight.get(self._token)
            owner = future is None
            if owner:
                future = Future()
                self._inflight[self._token] = future

        if owner:
            try:
                ok = bool(self._probe())
            except Exception:
                logger.exception("Schema readiness probe failed")
                ok = False
            with self._lock:
                self._ready = ok
                self._inflight.pop(self._token, None)
            future.set_result(ok)
            if ok:
                logger.info("Schema ready (%s)", self._token)

        return future.result()

    def reset(self) -> None:
        with self._lock:
            self._ready = False
