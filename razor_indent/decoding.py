"""Pick a text decoding for raw document bytes."""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Lenient candidates, tried in order; earlier entries win ties.
CANDIDATE_ENCODINGS = ("utf-8", "cp932", "euc_jp", "cp1252")

REPLACEMENT_PENALTY = 10
CONTROL_PENALTY = 5
SCRIPT_REWARD = 2

# Hiragana/Katakana, CJK unified ideographs, halfwidth katakana
SCRIPT_RANGES = ((0x3040, 0x30FF), (0x4E00, 0x9FFF), (0xFF61, 0xFF9F))


@dataclass(frozen=True)
class DecodedText:
    """Text decoded from bytes.

    Attributes:
        text: Decoded document.
        encoding: Codec name, reusable for writing the document back.
        score: Heuristic score of a lenient decode; None for a strict decode.
    """

    text: str
    encoding: str
    score: int | None = None

    @property
    def lossless(self) -> bool:
        return self.score is None or "\ufffd" not in self.text


def _is_control(character: str) -> bool:
    code = ord(character)
    if character in "\t\r\n":
        return False
    return code < 0x20 or 0x7F <= code <= 0x9F


def score_text(text: str) -> int:
    """Score a candidate decode.

    Replacement characters and control characters are penalized; characters
    from the Japanese script ranges are rewarded.

    Examples:
        score_text("abc")  # 0
        score_text("\\ufffd")  # -10
        score_text("日本")  # 4
    """
    score = 0
    for character in text:
        if character == "\ufffd":
            score -= REPLACEMENT_PENALTY
        elif _is_control(character):
            score -= CONTROL_PENALTY
        elif any(start <= ord(character) <= end for start, end in SCRIPT_RANGES):
            score += SCRIPT_REWARD
    return score


def decode_bytes(data: bytes) -> DecodedText:
    """Decode raw bytes with the best-scoring candidate encoding.

    Strict UTF-8 is tried first, keeping a byte-order mark as ``utf-8-sig``.
    Otherwise every candidate is decoded leniently and the highest score wins.

    Args:
        data: Raw document bytes.

    Returns:
        DecodedText: Decoded text and the chosen encoding.

    Examples:
        decode_bytes("<p>日本</p>".encode("cp932")).encoding  # "cp932"
    """
    encoding = "utf-8-sig" if data.startswith(codecs.BOM_UTF8) else "utf-8"
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as error:
        logger.debug("Strict UTF-8 decode failed: %s", error)
    else:
        return DecodedText(text=text, encoding=encoding)

    best: DecodedText | None = None
    for candidate in CANDIDATE_ENCODINGS:
        text = data.decode(candidate, errors="replace")
        score = score_text(text)
        logger.debug("Candidate %s scored %d", candidate, score)
        if best is None or score > best.score:
            best = DecodedText(text=text, encoding=candidate, score=score)
    return best
