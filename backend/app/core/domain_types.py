"""Domain Types — identifiers shared by the core and the shell.

Invariants:
    - IdentityId, GoalId, SubTaskId wrap 24-char lowercase hex strings
    - new_object_id() is unique within a process (counter in the low bytes)

Design Decisions:
    - ObjectId-compatible layout (4-byte seconds, 5 process bytes, 3-byte counter):
      ids sort by creation second and stay stable across storage engines
"""

import itertools
import os
import re
import threading
import time
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

IdentityId = NewType("IdentityId", str)
GoalId = NewType("GoalId", str)
SubTaskId = NewType("SubTaskId", str)


# ─── ObjectId generation ─────────────────────────────────────────

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-f]{24}$")

_PROCESS_BYTES = os.urandom(5)
_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))
_counter_lock = threading.Lock()


def new_object_id() -> str:
    """Generate a 24-hex identifier."""
    with _counter_lock:
        count = next(_counter) % 0x1000000
    timestamp = int(time.time()).to_bytes(4, "big")
    return (timestamp + _PROCESS_BYTES + count.to_bytes(3, "big")).hex()


def is_object_id(value: object) -> bool:
    return isinstance(value, str) and OBJECT_ID_PATTERN.match(value) is not None
