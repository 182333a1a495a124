from __future__ import annotations

from collections.abc import Mapping, Sequence
import math
from dataclasses import dataclass, field
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, ClassVar

from data_designer_echo_guard.errors import EchoConfigurationError

# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


class FieldName(str, Enum):
    """Token attributes that conditions and filters may select by name."""

    TEXT = "text"
    NORMALIZED = "normalized"
    STEM = "stem"
    PART_OF_SPEECH = "partOfSpeech"


_FIELD_ATTRIBUTES = {
    FieldName.TEXT: "text",
    FieldName.NORMALIZED: "normalized",
    FieldName.STEM: "stem",
    FieldName.PART_OF_SPEECH: "part_of_speech",
}


def field_getter(name: FieldName | str) -> Callable[[Token], str]:
    try:
        return attrgetter(_FIELD_ATTRIBUTES[FieldName(name)])
    except ValueError:
        raise EchoConfigurationError(f"Unknown token field: {name!r}.") from None


# ---------------------------------------------------------------------------
# Tokens and containers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Token:
    index: int
    text: str
    normalized: str
    stem: str
    part_of_speech: str = ""
    location: Any = None


@dataclass(frozen=True)
class TokenContainer:
    """Ordered tokens sharing one analysis scope."""

    tokens: tuple[Token, ...]

    def __post_init__(self) -> None:
        if not self.tokens:
            raise ValueError("A token container needs at least one token.")

    def __iter__(self):
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class Content:
    """Tagged tokens of one document, grouped into sentences.

    Acts as the scope resolver for the engine: ``document`` yields a single
    container with every token, ``sentence`` yields one container per
    non-empty sentence.
    """

    SCOPES: ClassVar[tuple[str, ...]] = ("document", "sentence")

    sentences: tuple[tuple[Token, ...], ...] = field(default_factory=tuple)

    @property
    def tokens(self) -> list[Token]:
        return [token for sentence in self.sentences for token in sentence]

    def get_scoped_tokens(self, scope: str) -> list[TokenContainer]:
        if scope == "document":
            tokens = self.tokens
            return [TokenContainer(tuple(tokens))] if tokens else []
        if scope == "sentence":
            return [TokenContainer(sentence) for sentence in self.sentences if sentence]
        raise EchoConfigurationError(f"Unknown scope: {scope!r}. Expected one of {', '.join(self.SCOPES)}.")


# ---------------------------------------------------------------------------
# Record conversion
# ---------------------------------------------------------------------------


def _token_from_record(record: Any, index: int, source: Any) -> Token:
    if not isinstance(record, Mapping):
        raise ValueError(f"Token record must be a mapping, got {type(record).__name__}.")
    if "text" not in record:
        raise ValueError(f"Token record {index} has no 'text'.")
    text = str(record["text"])
    normalized = str(record.get(FieldName.NORMALIZED.value, text))
    index = int(record.get("index", index))
    return Token(
        index=index,
        text=text,
        normalized=normalized,
        stem=str(record.get(FieldName.STEM.value, normalized)),
        part_of_speech=str(record.get(FieldName.PART_OF_SPEECH.value, "")),
        location=record.get("location", {"source": source, "index": index}),
    )


def _as_list(value: Any, what: str) -> list[Any]:
    # Columns loaded from parquet hold numpy arrays rather than lists.
    if hasattr(value, "tolist"):
        value = value.tolist()
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
        raise ValueError(f"Expected {what}, got {type(value).__name__}.")
    return list(value)


def content_from_records(value: Sequence[Any], source: Any = None) -> Content:
    """Build ``Content`` from plain token records.

    Args:
        value: Either a flat list of token mappings (one sentence) or a list of
            such lists (one per sentence). Keys are ``text``, ``normalized``,
            ``stem``, ``partOfSpeech`` and optionally ``index`` and ``location``.
        source: Opaque tag folded into default locations, e.g. a row number.

    Returns:
        The assembled content. Indices default to running positions across
        the whole document. A missing row (None or NaN) gives empty content.

    Raises:
        ValueError: If records are malformed or two tokens share an index.
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return Content()

    items = _as_list(value, "a list of token records")
    if items and all(isinstance(item, Mapping) for item in items):
        groups: list[Any] = [items]
    else:
        groups = items

    position = 0
    seen: set[int] = set()
    sentences = []
    for group in groups:
        sentence = []
        for record in _as_list(group, "a sentence as a list of token records"):
            token = _token_from_record(record, position, source)
            if token.index in seen:
                raise ValueError(f"Duplicate token index {token.index} in record {position}.")
            seen.add(token.index)
            sentence.append(token)
            position += 1
        sentences.append(tuple(sentence))
    return Content(tuple(sentences))
