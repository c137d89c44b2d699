"""
Checks for realtime activity records.

A record is the list of [on, off] pairs (session-relative milliseconds) for one
activity. Pairs must be sorted and must not touch or overlap. An off time of
-1 means the activity is still on; that is only legal for the last pair of a
session that is still being recorded. Closed sessions carry real off times,
see close_session().
"""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Sequence, Tuple

from DesignAwareness.errors import ErrorKind
from DesignAwareness.models import RealtimeSession

log = logging.getLogger(__name__)

OPEN_OFF_TIME = -1


class TimingViolation(NamedTuple):
    index: int
    kind: ErrorKind
    message: str


def validate_record(pairs: Sequence[Tuple[int, int]], session_duration: Optional[int],
                    session_ongoing: bool = False) -> List[TimingViolation]:
    """
    Return every offending pair of the record, in index order. A pair may appear
    more than once when it breaks several rules. ``session_duration`` may be None
    when it is unknown, which skips the upper-bound checks only.
    """
    violations: List[TimingViolation] = []
    last = len(pairs) - 1

    for index, (on, off) in enumerate(pairs):
        if on < 0:
            violations.append(TimingViolation(index, ErrorKind.RANGE, f"on time {on} is negative"))

        if off == OPEN_OFF_TIME:
            if not session_ongoing:
                violations.append(TimingViolation(
                    index, ErrorKind.RANGE, "off time -1 (still on) is not allowed in a closed session"))
            elif index != last:
                violations.append(TimingViolation(
                    index, ErrorKind.RANGE, "only the last pair of a record may be left on (-1)"))
            if session_duration is not None and on > session_duration:
                violations.append(TimingViolation(
                    index, ErrorKind.RANGE, f"on time {on} is after the session duration {session_duration}"))
        else:
            if off <= on:
                violations.append(TimingViolation(
                    index, ErrorKind.ORDERING, f"off time {off} is not after on time {on}"))
            if session_duration is not None and off > session_duration:
                violations.append(TimingViolation(
                    index, ErrorKind.RANGE, f"off time {off} exceeds the session duration {session_duration}"))

        if index > 0:
            previous_off = pairs[index - 1][1]
            # an open previous pair is already reported above
            if previous_off != OPEN_OFF_TIME and on <= previous_off:
                violations.append(TimingViolation(
                    index, ErrorKind.ORDERING,
                    f"on time {on} must be after the previous pair's off time {previous_off}"))

    return violations


def close_session(session: RealtimeSession) -> RealtimeSession:
    """
    Return a copy of a finished session with every still-on pair (-1) turned off
    at the session's duration. Hosts call this when recording stops; decoding
    never does it implicitly.
    """
    closed = session.model_copy(deep=True)
    closed_pairs = 0
    for record in closed.data:
        for pair_index, (on, off) in enumerate(record):
            if off == OPEN_OFF_TIME:
                record[pair_index] = (on, closed.duration)
                closed_pairs += 1
    if closed_pairs:
        log.debug(f"Closed {closed_pairs} open timing pair(s) in session {closed.id} at {closed.duration} ms")
    return closed
