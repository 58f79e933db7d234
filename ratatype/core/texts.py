from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import yaml

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 500
MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 20
DICT_PATH = Path("/usr/share/dict/words")

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class TextSource(str, enum.Enum):
    GOOGLE = "google"
    SYSTEM = "system"
    BUILTIN = "builtin"

    @classmethod
    def parse(cls, value: str) -> "TextSource":
        key = value.strip().lower()
        for source, aliases in _SOURCE_ALIASES.items():
            if key in aliases:
                return source
        raise ValueError(
            f"Invalid text source '{value}'. Valid options: google, system, builtin"
        )

    def __str__(self) -> str:
        return self.value


_SOURCE_ALIASES = {
    TextSource.GOOGLE: ("google", "google10k", "top10k"),
    TextSource.SYSTEM: ("system", "dict", "dictionary"),
    TextSource.BUILTIN: ("builtin", "built-in", "samples"),
}


@dataclass(frozen=True)
class Excerpt:
    title: str
    text: str


@dataclass(frozen=True)
class TextCorpus:
    """Static text data bundled with the package, loaded once at startup."""

    excerpts: Tuple[Excerpt, ...]
    common_words: Tuple[str, ...]

    @classmethod
    def load(cls, data_dir: Path = DATA_DIR) -> "TextCorpus":
        return cls(
            excerpts=_load_excerpts(data_dir / "excerpts.yaml"),
            common_words=_load_word_list(data_dir / "words" / "google-10000.txt"),
        )


def _load_excerpts(path: Path) -> Tuple[Excerpt, ...]:
    if not path.exists():
        raise FileNotFoundError(f"Excerpt file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not raw or not isinstance(raw, dict):
        raise ValueError(f"{path.name}: expected YAML with an 'excerpts' list")
    entries = raw.get("excerpts")
    if not isinstance(entries, list):
        raise ValueError(f"{path.name}: missing or invalid 'excerpts'")

    excerpts: List[Excerpt] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ValueError(f"{path.name}: excerpt #{index} is not a mapping")
        title = entry.get("title")
        text = entry.get("text")
        if not title or not isinstance(title, str):
            raise ValueError(f"{path.name}: excerpt #{index} has no 'title'")
        if not text or not str(text).strip():
            raise ValueError(f"{path.name}: excerpt '{title}' has no 'text'")
        # target text is a single line
        excerpts.append(Excerpt(title=title.strip(), text=" ".join(str(text).split())))
    if not excerpts:
        raise ValueError(f"{path.name}: no excerpts defined")
    return tuple(excerpts)


def _load_word_list(path: Path) -> Tuple[str, ...]:
    if not path.exists():
        raise FileNotFoundError(f"Word list not found: {path}")
    lines = path.read_text(encoding="utf-8").splitlines()
    return tuple(line.strip() for line in lines if line.strip())


def filter_words(words: Sequence[str], max_word_length: int) -> List[str]:
    """Keep lowercase ASCII alphabetic words of length [3, max_word_length]."""
    kept = []
    for word in words:
        word = word.strip()
        if (
            MIN_WORD_LENGTH <= len(word) <= max_word_length
            and word.isascii()
            and word.isalpha()
            and word.islower()
        ):
            kept.append(word)
    return kept


class TextProvider:
    """Builds the target text for a session from one of the text sources.

    Word sources that are unavailable or filter down to nothing fall back to
    the built-in excerpts, which always succeed.
    """

    def __init__(
        self,
        corpus: TextCorpus,
        dictionary_path: Path = DICT_PATH,
        rng: Optional[random.Random] = None,
        min_length: int = MIN_TEXT_LENGTH,
    ) -> None:
        self._corpus = corpus
        self._dictionary_path = dictionary_path
        self._rng = rng or random.Random()
        self._min_length = min_length

    def generate(self, source: TextSource, max_word_length: int) -> str:
        if source is TextSource.BUILTIN:
            return self.builtin_text()

        if source is TextSource.GOOGLE:
            words = filter_words(self._corpus.common_words, max_word_length)
        else:
            try:
                words = self.load_dictionary(max_word_length)
            except OSError as e:
                logger.warning(
                    "Could not load dictionary from %s: %s. Using built-in texts.",
                    self._dictionary_path,
                    e,
                )
                return self.builtin_text()

        if not words:
            logger.warning(
                "Text source '%s' has no words of length %d-%d. Using built-in texts.",
                source,
                MIN_WORD_LENGTH,
                max_word_length,
            )
            return self.builtin_text()
        return self._assemble(words)

    def load_dictionary(self, max_word_length: int) -> List[str]:
        content = self._dictionary_path.read_text(encoding="utf-8", errors="replace")
        return filter_words(content.splitlines(), max_word_length)

    def builtin_text(self) -> str:
        return self._assemble([excerpt.text for excerpt in self._corpus.excerpts])

    def _assemble(self, pieces: Sequence[str]) -> str:
        parts: List[str] = []
        length = 0
        while length < self._min_length:
            piece = self._rng.choice(pieces)
            length += len(piece) + (1 if parts else 0)
            parts.append(piece)
        return " ".join(parts)
