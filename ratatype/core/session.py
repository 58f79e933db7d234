from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from ratatype.core.metrics import KeyMetricsTracker
from ratatype.core.wpm import WpmSampler

logger = logging.getLogger(__name__)

TimeSource = Callable[[], float]


class Key(enum.Enum):
    """Non-printable inputs the engine understands."""

    BACKSPACE = "backspace"


Keystroke = Union[str, Key]


@dataclass
class SessionState:
    """Mutable per-session record. Replaced wholesale on restart."""

    target: str
    correction_mode: bool
    cursor: int = 0
    typed: List[str] = field(default_factory=list)
    correction_marks: List[bool] = field(default_factory=list)
    total_keystrokes: int = 0
    total_errors: int = 0
    started_at: Optional[float] = None
    finished: bool = False

    def __post_init__(self) -> None:
        if not self.correction_marks:
            self.correction_marks = [False] * len(self.target)


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session handed to the renderer each frame."""

    target: str
    typed: str
    cursor: int
    correction_marks: Tuple[bool, ...]
    total_keystrokes: int
    total_errors: int
    correction_mode: bool
    started: bool
    finished: bool
    elapsed: float
    remaining: float
    current_wpm: float
    accuracy: float


class SessionEngine:
    """Character-level typing session.

    Applies keystrokes against the target text and feeds two analytics
    components:

      * :class:`KeyMetricsTracker` receives one latency sample per attempt at a
        position (keyed by the expected character) and one error per mismatch.
      * :class:`WpmSampler` is asked for a reading after every correct,
        cursor-advancing keystroke.

    With ``correction_mode`` the cursor only advances on the expected
    character; without it every printable keystroke advances the cursor and
    mismatches are merely counted. Backspace moves the cursor back but never
    rewrites recorded errors, correction marks or latency samples.

    The clock starts on the first keystroke. :meth:`tick_timeout` must be
    called every loop iteration so that an idle learner still runs out of time.
    """

    def __init__(
        self,
        target: str,
        duration: float,
        correction_mode: bool = False,
        clock: TimeSource = time.monotonic,
    ) -> None:
        self._duration = float(duration)
        self._clock = clock
        self._correction_mode = correction_mode
        self._reset(target)

    def _reset(self, target: str) -> None:
        self._state = SessionState(target=target, correction_mode=self._correction_mode)
        self._tracker = KeyMetricsTracker()
        self._sampler = WpmSampler()
        self._key_started_at: Optional[float] = None

    def restart(self, target: str) -> None:
        """Discard all state and analytics and begin a new session on ``target``."""
        self._reset(target)
        logger.info("Session restarted with %d characters", len(target))

    # -- read-only accessors -------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def target(self) -> str:
        return self._state.target

    @property
    def cursor(self) -> int:
        return self._state.cursor

    @property
    def typed(self) -> str:
        """Echo of what was entered, used only for display classification."""
        return "".join(self._state.typed)

    @property
    def correction_marks(self) -> Tuple[bool, ...]:
        return tuple(self._state.correction_marks)

    @property
    def total_keystrokes(self) -> int:
        return self._state.total_keystrokes

    @property
    def total_errors(self) -> int:
        return self._state.total_errors

    @property
    def correction_mode(self) -> bool:
        return self._correction_mode

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def started_at(self) -> Optional[float]:
        return self._state.started_at

    @property
    def tracker(self) -> KeyMetricsTracker:
        return self._tracker

    @property
    def sampler(self) -> WpmSampler:
        return self._sampler

    def is_started(self) -> bool:
        return self._state.started_at is not None

    def is_finished(self) -> bool:
        return self._state.finished

    # -- input -----------------------------------------------------------------

    def apply_keystroke(self, key: Keystroke) -> None:
        """Apply a printable character or :attr:`Key.BACKSPACE`.

        Ignored once the session is finished. Strings that are not a single
        printable character are ignored as well and do not start the clock.
        """
        state = self._state
        if state.finished:
            return
        is_char = isinstance(key, str) and len(key) == 1 and key.isprintable()
        if key is not Key.BACKSPACE and not is_char:
            return

        now = self._clock()
        if state.started_at is None:
            state.started_at = now
            self._start_key_timer(now)
            logger.info(
                "Session started (%d characters, correction mode %s)",
                len(state.target),
                "on" if self._correction_mode else "off",
            )

        if key is Key.BACKSPACE:
            self._backspace(now)
        else:
            self._type_char(key, now)

    def _type_char(self, char: str, now: float) -> None:
        state = self._state
        if state.cursor >= len(state.target):
            return
        expected = state.target[state.cursor]

        if self._key_started_at is not None:
            self._tracker.record_attempt(expected, max(0.0, now - self._key_started_at))

        if char == expected:
            state.typed.append(char)
            state.total_keystrokes += 1
            state.cursor += 1
            self._start_key_timer(now)
            self._sampler.maybe_sample(now - state.started_at, state.cursor)
        else:
            state.total_keystrokes += 1
            state.total_errors += 1
            self._tracker.record_error(expected)
            state.correction_marks[state.cursor] = True
            if not self._correction_mode:
                # Errors do not block progress outside correction mode.
                state.typed.append(char)
                state.cursor += 1
                self._start_key_timer(now)

        if state.cursor == len(state.target):
            self._finish("text completed")

    def _backspace(self, now: float) -> None:
        state = self._state
        if not state.typed:
            return
        state.typed.pop()
        state.total_keystrokes += 1
        if state.cursor > 0:
            state.cursor -= 1
            self._start_key_timer(now)

    def _start_key_timer(self, now: float) -> None:
        if self._state.cursor < len(self._state.target):
            self._key_started_at = now
        else:
            self._key_started_at = None

    def tick_timeout(self, now: Optional[float] = None) -> bool:
        """Finish the session once the configured duration has elapsed.

        Returns True if the session is finished after the check.
        """
        state = self._state
        if state.finished:
            return True
        if state.started_at is None:
            return False
        if now is None:
            now = self._clock()
        if now - state.started_at >= self._duration:
            self._finish("time is up")
        return state.finished

    def _finish(self, reason: str) -> None:
        self._state.finished = True
        self._key_started_at = None
        logger.info(
            "Session finished (%s): avg %.1f WPM, accuracy %.1f%%",
            reason,
            self._sampler.average(),
            self.accuracy(),
        )

    # -- derived queries -------------------------------------------------------

    def accuracy(self) -> float:
        """Percentage of keystrokes that were not errors; 100 before any input."""
        total = self._state.total_keystrokes
        if total == 0:
            return 100.0
        return (total - self._state.total_errors) / total * 100.0

    def elapsed(self, now: Optional[float] = None) -> float:
        if self._state.started_at is None:
            return 0.0
        if now is None:
            now = self._clock()
        return max(0.0, now - self._state.started_at)

    def remaining(self, now: Optional[float] = None) -> float:
        return max(0.0, self._duration - self.elapsed(now))

    def current_wpm(self) -> float:
        return self._sampler.current()

    def average_wpm(self) -> float:
        return self._sampler.average()

    def peak_wpm(self) -> float:
        return self._sampler.peak()

    def snapshot(self, now: Optional[float] = None) -> SessionSnapshot:
        if now is None:
            now = self._clock()
        state = self._state
        return SessionSnapshot(
            target=state.target,
            typed="".join(state.typed),
            cursor=state.cursor,
            correction_marks=tuple(state.correction_marks),
            total_keystrokes=state.total_keystrokes,
            total_errors=state.total_errors,
            correction_mode=self._correction_mode,
            started=state.started_at is not None,
            finished=state.finished,
            elapsed=self.elapsed(now),
            remaining=self.remaining(now),
            current_wpm=self._sampler.current(),
            accuracy=self.accuracy(),
        )
