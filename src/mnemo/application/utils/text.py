import re

STOP_WORDS = frozenset(
    {"the", "a", "an", "of", "in", "on", "at", "to", "for", "and", "or", "is", "are", "was", "were"}
)

_PUNCT_RE = re.compile(r"[^\w\s]")
_PUNCT_KEEP_PERIOD_RE = re.compile(r"[^\w\s.]")
_WS_RE = re.compile(r"\s+")


# ---------- Normalization ----------


def normalize_text(text: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    out = _PUNCT_RE.sub("", text.lower().strip())
    return _WS_RE.sub(" ", out).strip()


def normalize_for_synonym(text: str) -> str:
    """Like normalize_text, but keeps periods so 'u.s.a.' stays distinct."""
    out = _PUNCT_KEEP_PERIOD_RE.sub("", text.lower().strip())
    return _WS_RE.sub(" ", out).strip()


def tokenize(normalized: str) -> list[str]:
    return [w for w in normalized.split(" ") if w]


def strip_stop_words(words: list[str]) -> list[str]:
    return [w for w in words if w not in STOP_WORDS]


# ---------- Edit distance ----------


def levenshtein_distance(a: str, b: str) -> int:
    """Classic insert/delete/substitute distance, two-row DP."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(
                min(
                    current[j - 1] + 1,  # insertion
                    previous[j] + 1,  # deletion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def typo_allowance(word: str) -> int:
    """Edit distance tolerated for a single word of this length."""
    if len(word) < 4:
        return 0
    if len(word) < 6:
        return 1
    return 2


def clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))
