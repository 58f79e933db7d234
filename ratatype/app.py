"""Application entry point and control loop for the Ratatype typing trainer."""

import argparse
import curses
import enum
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ratatype.core.config import (
    ConfigError,
    LOG_LEVELS,
    Settings,
    default_log_path,
    load_config_file,
    validate_duration,
    validate_log_level,
    validate_max_word_length,
    validate_path,
    validate_text_source,
)
from ratatype.core.history import HistoryRecord, HistoryRecorder
from ratatype.core.session import Key, Keystroke, SessionEngine, TimeSource
from ratatype.core.texts import TextCorpus, TextProvider
from ratatype.ui.terminal import TerminalUI

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

TYPING_POLL_MS = 50
RESULTS_POLL_MS = 100

ESCAPE = 27
BACKSPACE_CODES = (curses.KEY_BACKSPACE, 127, 8)
ENTER_CODES = (curses.KEY_ENTER, 10, 13)


class Command(enum.Enum):
    QUIT = "quit"
    CONFIRM = "confirm"


def configure_logging(level: str = "INFO", log_file: Optional[Path] = None) -> None:
    """Configure application-wide logging with a standard format.

    curses owns the terminal while a session runs, so records go to a file.
    """
    log_file = log_file or default_log_path()
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        print(f"Warning: cannot write log file {log_file}: {e}", file=sys.stderr)
        handler = logging.NullHandler()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[handler],
    )


def translate_key(raw: Union[str, int, None]) -> Union[Keystroke, Command, None]:
    """Map a curses key (``get_wch`` str or int) to an engine input or command."""
    if raw is None:
        return None
    code = ord(raw) if isinstance(raw, str) and len(raw) == 1 else raw
    if code == ESCAPE:
        return Command.QUIT
    if code in BACKSPACE_CODES:
        return Key.BACKSPACE
    if code in ENTER_CODES:
        return Command.CONFIRM
    if isinstance(raw, str) and len(raw) == 1 and raw.isprintable():
        return raw
    return None


class Trainer:
    """Runs typing sessions and their results screens until the user quits.

    ``ui`` is anything with ``read_key(timeout_ms)``, ``draw_typing(snapshot)``
    and ``draw_results(engine, notice)``; see :class:`ratatype.ui.terminal.TerminalUI`.
    """

    def __init__(
        self,
        settings: Settings,
        provider: TextProvider,
        recorder: Optional[HistoryRecorder] = None,
        clock: TimeSource = time.monotonic,
    ) -> None:
        self._settings = settings
        self._provider = provider
        self._recorder = recorder
        self._notice: Optional[str] = None
        self._engine = SessionEngine(
            self._new_text(),
            duration=settings.duration,
            correction_mode=settings.require_correction,
            clock=clock,
        )
        self.completed_sessions = 0

    @property
    def engine(self) -> SessionEngine:
        return self._engine

    @property
    def notice(self) -> Optional[str]:
        return self._notice

    def _new_text(self) -> str:
        text = self._provider.generate(self._settings.text_source, self._settings.max_word_length)
        logger.info(
            "Generated %d characters from '%s' (max word length %d)",
            len(text),
            self._settings.text_source,
            self._settings.max_word_length,
        )
        return text

    def restart(self) -> None:
        self._notice = None
        self._engine.restart(self._new_text())

    def run(self, ui) -> None:
        while True:
            if not self._run_typing(ui):
                return
            self.completed_sessions += 1
            self._save_history()
            if not self._run_results(ui):
                return
            self.restart()

    def _run_typing(self, ui) -> bool:
        """Return True when the session finished, False when the user quit."""
        engine = self._engine
        while True:
            ui.draw_typing(engine.snapshot())
            action = translate_key(ui.read_key(TYPING_POLL_MS))
            if action is Command.QUIT:
                logger.info("Session cancelled")
                return False
            if action is Key.BACKSPACE or isinstance(action, str):
                engine.apply_keystroke(action)
            # the clock runs out even when no key arrives
            if engine.tick_timeout():
                return True

    def _run_results(self, ui) -> bool:
        """Return True to restart, False to quit."""
        while True:
            ui.draw_results(self._engine, self._notice)
            action = translate_key(ui.read_key(RESULTS_POLL_MS))
            if action is Command.QUIT:
                return False
            if action is Command.CONFIRM:
                return True

    def _save_history(self) -> None:
        if self._recorder is None:
            return
        record = HistoryRecord.from_engine(
            self._engine,
            text_source=str(self._settings.text_source),
            max_word_length=self._settings.max_word_length,
        )
        try:
            self._recorder.append(record)
        except OSError as e:
            logger.warning("Failed to save test history to %s: %s", self._recorder.path, e)
            self._notice = f"Warning: failed to save test history: {e}"


def _argument_type(validator: Callable[[Any], Any]) -> Callable[[str], Any]:
    def convert(value: str) -> Any:
        try:
            return validator(value)
        except ConfigError as e:
            raise argparse.ArgumentTypeError(str(e)) from None

    return convert


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ratatype",
        description="Terminal typing speed trainer with per-key analytics",
    )
    p.add_argument("-d", "--duration", type=_argument_type(validate_duration), default=None,
                   help="Test duration in seconds (default 30)")
    p.add_argument("-c", "--require-correction", action="store_true", default=None,
                   help="Require the correct key before the cursor advances")
    p.add_argument("-s", "--text-source", type=_argument_type(validate_text_source), default=None,
                   help="Text source: google, system or builtin (default google)")
    p.add_argument("-m", "--max-word-length", type=_argument_type(validate_max_word_length),
                   default=None, help="Longest word to include, 3-20 (default 7)")
    p.add_argument("--history-file", type=validate_path, default=None,
                   help="CSV file completed sessions are appended to")
    p.add_argument("--no-history", action="store_true", help="Do not record completed sessions")
    p.add_argument("--show-history", type=int, metavar="N", default=None,
                   help="Print the last N recorded sessions and exit")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--log-level", type=_argument_type(validate_log_level), default=None,
                   help=f"One of {', '.join(LOG_LEVELS)}")
    p.add_argument("--log-file", type=Path, default=None, help="Where log records are written")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def resolve_settings(args: argparse.Namespace) -> Settings:
    """Defaults, overridden by the config file, overridden by the command line."""
    settings = Settings().merged(load_config_file(args.config))
    cli: Dict[str, Any] = {
        "duration": args.duration,
        "require_correction": args.require_correction,
        "text_source": args.text_source,
        "max_word_length": args.max_word_length,
        "history_file": args.history_file,
        "log_level": args.log_level,
    }
    return settings.merged(cli)


def format_history(records: Sequence[HistoryRecord], count: int) -> List[str]:
    if not records:
        return ["No sessions recorded yet."]
    lines = [f"{'Date':<17}{'Time':>6}{'Avg':>8}{'Peak':>8}{'Acc':>8}{'Chars':>7}{'Err':>5}  Source"]
    for record in records[-count:]:
        when = datetime.fromtimestamp(record.timestamp).strftime("%Y-%m-%d %H:%M")
        mode = " (correction)" if record.correction_mode else ""
        lines.append(
            f"{when:<17}{record.duration_seconds:>5}s{record.avg_wpm:>8.1f}{record.peak_wpm:>8.1f}"
            f"{record.accuracy:>7.1f}%{record.characters_typed:>7}{record.errors:>5}  "
            f"{record.text_source}{mode}"
        )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = resolve_settings(args)
    except ConfigError as e:
        parser.error(str(e))

    configure_logging(settings.log_level, args.log_file)

    if args.show_history is not None:
        if args.show_history <= 0:
            parser.error("--show-history must be a positive integer")
        for line in format_history(HistoryRecorder(settings.history_file).read_all(), args.show_history):
            print(line)
        return 0

    provider = TextProvider(TextCorpus.load())
    recorder = None if args.no_history else HistoryRecorder(settings.history_file)
    trainer = Trainer(settings, provider, recorder)

    try:
        curses.wrapper(lambda stdscr: trainer.run(TerminalUI(stdscr)))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130

    if trainer.notice:
        print(trainer.notice, file=sys.stderr)
    return 0


def run() -> None:
    sys.exit(main())
