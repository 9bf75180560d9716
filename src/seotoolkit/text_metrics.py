"""Text metrics - readability formulas and keyword frequency scoring."""

import re
from collections import Counter

from seotoolkit.constants import (
    DEFAULT_TOP_KEYWORDS,
    MIN_KEYWORD_LENGTH,
    READABILITY_BANDS,
    READABILITY_FLOOR_LABEL,
    READABILITY_NOT_AVAILABLE,
    SHORT_WORD_MAX_LENGTH,
    STOP_WORDS,
    SYLLABLE_VOWELS,
)
from seotoolkit.models import ReadabilityMetrics, ScoredKeyword
from seotoolkit.scoring import round_half_up

_SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')
_NON_LETTER_RE = re.compile(r'[^a-z]')
_VOWEL_GROUP_RE = re.compile(rf'[{SYLLABLE_VOWELS}]+')
_NON_TOKEN_RE = re.compile(r'[^a-z0-9\s]')


def split_sentences(text: str) -> list[str]:
    """Split text on runs of sentence punctuation, dropping blank pieces."""
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def split_words(text: str) -> list[str]:
    return text.split()


def count_syllables(word: str) -> int:
    """Count syllables in a word (English heuristic).

    Vowel groups are counted, a trailing silent ``e`` is dropped and a
    consonant + ``le`` ending adds one back. Every word has at least one
    syllable.
    """
    word = _NON_LETTER_RE.sub('', word.lower())
    if len(word) <= SHORT_WORD_MAX_LENGTH:
        return 1

    syllables = len(_VOWEL_GROUP_RE.findall(word)) or 1

    if word.endswith('e'):
        syllables -= 1
    if word.endswith('le') and word[-3] not in SYLLABLE_VOWELS:
        syllables += 1

    return max(1, syllables)


def readability_level(score: float) -> str:
    """Map a Flesch Reading Ease score to its descriptive band."""
    for floor, label in READABILITY_BANDS:
        if score >= floor:
            return label
    return READABILITY_FLOOR_LABEL


def calculate_readability(text: str) -> ReadabilityMetrics:
    """Calculate Flesch readability metrics.

    Args:
        text: Plain text to analyze

    Returns:
        ReadabilityMetrics; all zeros and level "N/A" when the text has
        no words or no sentences
    """
    sentences = split_sentences(text)
    words = split_words(text)

    if not words or not sentences:
        return ReadabilityMetrics(readability_level=READABILITY_NOT_AVAILABLE)

    total_syllables = sum(count_syllables(word) for word in words)
    avg_sentence_length = len(words) / len(sentences)
    avg_syllables_per_word = total_syllables / len(words)
    avg_word_length = sum(len(word) for word in words) / len(words)

    reading_ease = 206.835 - (1.015 * avg_sentence_length) - (84.6 * avg_syllables_per_word)
    reading_ease = max(0.0, min(100.0, reading_ease))

    grade = (0.39 * avg_sentence_length) + (11.8 * avg_syllables_per_word) - 15.59
    grade = max(0.0, grade)

    return ReadabilityMetrics(
        flesch_reading_ease=round_half_up(reading_ease, 1),
        flesch_kincaid_grade=round_half_up(grade, 1),
        avg_sentence_length=round_half_up(avg_sentence_length, 1),
        avg_word_length=round_half_up(avg_word_length, 1),
        readability_level=readability_level(reading_ease),
    )


def tokenize(text: str) -> list[str]:
    """Lowercase keyword tokens with punctuation and stop words removed."""
    cleaned = _NON_TOKEN_RE.sub(' ', text.lower())
    return [
        token for token in cleaned.split()
        if len(token) > MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    ]


def extract_keywords(text: str, top_n: int = DEFAULT_TOP_KEYWORDS) -> list[ScoredKeyword]:
    """Extract the most frequent keywords from text.

    Each keyword is scored by its count divided by the highest count in
    the text, rounded to two decimals. Equal scores keep first-seen order.

    Args:
        text: Text to mine for keywords
        top_n: Maximum number of keywords to return

    Returns:
        Keywords sorted by descending score
    """
    frequency = Counter(tokenize(text))
    if not frequency or top_n <= 0:
        return []

    max_frequency = max(frequency.values())
    scored = [
        ScoredKeyword(keyword=keyword, score=round_half_up(count / max_frequency, 2))
        for keyword, count in frequency.items()
    ]
    scored.sort(key=lambda kw: kw.score, reverse=True)
    return scored[:top_n]
