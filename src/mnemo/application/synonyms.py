"""
Synonym dictionary for lenient answer matching.

Maps canonical terms to their interchangeable surface forms. The reverse
lookup is built once at import and never mutated afterwards, so it can be
read from any thread or task without locking.
"""

from types import MappingProxyType

from mnemo.application.utils.text import normalize_for_synonym, strip_stop_words, tokenize

# Canonical term -> synonyms (lowercase)
SYNONYMS: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        # Numbers
        "0": ("zero", "nil", "none", "o"),
        "1": ("one", "i", "single", "first"),
        "2": ("two", "ii", "second", "pair", "couple"),
        "3": ("three", "iii", "third"),
        "4": ("four", "iv", "fourth"),
        "5": ("five", "v", "fifth"),
        "6": ("six", "vi", "sixth"),
        "7": ("seven", "vii", "seventh"),
        "8": ("eight", "viii", "eighth"),
        "9": ("nine", "ix", "ninth"),
        "10": ("ten", "x", "tenth"),
        "11": ("eleven", "xi", "eleventh"),
        "12": ("twelve", "xii", "twelfth", "dozen"),
        "100": ("hundred", "c"),
        "1000": ("thousand", "m", "k"),
        # Countries and organizations
        "usa": (
            "united states",
            "america",
            "us",
            "u.s.",
            "u.s.a.",
            "united states of america",
            "the united states",
        ),
        "uk": ("united kingdom", "britain", "great britain", "england", "u.k."),
        "ussr": ("soviet union", "russia", "u.s.s.r."),
        "uae": ("united arab emirates", "u.a.e."),
        "prc": ("china", "peoples republic of china", "people's republic of china"),
        "un": ("united nations", "u.n."),
        "eu": ("european union", "e.u."),
        "nato": ("north atlantic treaty organization",),
        # Math operations
        "add": ("addition", "plus", "sum"),
        "subtract": ("subtraction", "minus", "difference"),
        "multiply": ("multiplication", "times", "product"),
        "divide": ("division", "quotient", "split"),
        "equals": ("equal", "is", "="),
        # Math terms
        "percent": ("percentage", "%"),
        "infinity": ("infinite", "∞"),
        "pi": ("π", "3.14159", "3.14"),
        # Chemistry
        "h2o": ("water", "dihydrogen monoxide"),
        "co2": ("carbon dioxide",),
        "o2": ("oxygen", "dioxygen"),
        "n2": ("nitrogen", "dinitrogen"),
        "nacl": ("salt", "sodium chloride", "table salt"),
        "hcl": ("hydrochloric acid",),
        "h2so4": ("sulfuric acid", "sulphuric acid"),
        "naoh": ("sodium hydroxide", "lye", "caustic soda"),
        # Biology
        "dna": ("deoxyribonucleic acid",),
        "rna": ("ribonucleic acid",),
        "atp": ("adenosine triphosphate",),
        # Physics
        "c": ("speed of light", "299792458 m/s", "3e8 m/s"),
        "e=mc2": ("e=mc²", "mass energy equivalence", "einstein equation"),
        # Units
        "km": ("kilometer", "kilometre", "kilometres", "kilometers"),
        "m": ("meter", "metre", "meters", "metres"),
        "cm": ("centimeter", "centimetre", "centimeters", "centimetres"),
        "mm": ("millimeter", "millimetre", "millimeters", "millimetres"),
        "kg": ("kilogram", "kilograms", "kilo", "kilos"),
        "g": ("gram", "grams"),
        "mg": ("milligram", "milligrams"),
        "l": ("liter", "litre", "liters", "litres"),
        "ml": ("milliliter", "millilitre", "milliliters", "millilitres"),
        "mi": ("mile", "miles"),
        "ft": ("foot", "feet"),
        "in": ("inch", "inches"),
        "lb": ("pound", "pounds", "lbs"),
        "oz": ("ounce", "ounces"),
        # Time and calendar eras
        "sec": ("second", "seconds", "s"),
        "min": ("minute", "minutes"),
        "hr": ("hour", "hours", "h"),
        "yr": ("year", "years"),
        "bc": ("bce", "b.c.", "b.c.e.", "before christ", "before common era"),
        "ad": ("ce", "a.d.", "c.e.", "anno domini", "common era"),
        # Compass directions
        "n": ("north", "northern"),
        "s": ("south", "southern"),
        "e": ("east", "eastern"),
        "w": ("west", "western"),
        "ne": ("northeast", "north east", "north-east"),
        "nw": ("northwest", "north west", "north-west"),
        "se": ("southeast", "south east", "south-east"),
        "sw": ("southwest", "south west", "south-west"),
        # Common abbreviations
        "vs": ("versus", "against", "v.", "v"),
        "etc": ("et cetera", "and so on", "and so forth"),
        "ie": ("i.e.", "that is", "in other words"),
        "eg": ("e.g.", "for example", "for instance"),
        # Historical periods
        "ww1": ("world war 1", "world war i", "first world war", "wwi", "the great war"),
        "ww2": ("world war 2", "world war ii", "second world war", "wwii"),
        # Educational shorthand
        "definition": ("meaning", "def"),
        "example": ("instance", "eg", "e.g."),
        "true": ("yes", "correct", "t", "y"),
        "false": ("no", "incorrect", "f", "n", "wrong"),
    }
)


def _build_reverse_lookup() -> MappingProxyType[str, str]:
    lookup: dict[str, str] = {}
    # Canonicals map to themselves and are never shadowed
    for canonical in SYNONYMS:
        lookup[normalize_for_synonym(canonical)] = canonical
    # First listing wins when a surface form appears under several canonicals
    for canonical, synonyms in SYNONYMS.items():
        for synonym in synonyms:
            key = normalize_for_synonym(synonym)
            if key and key not in lookup:
                lookup[key] = canonical
    return MappingProxyType(lookup)


REVERSE_LOOKUP = _build_reverse_lookup()


def get_canonical(term: str) -> str | None:
    """Return the canonical form of a word or phrase, or None if unknown."""
    return REVERSE_LOOKUP.get(normalize_for_synonym(term))


def get_synonyms(term: str) -> list[str]:
    """All known forms of a term, canonical first. Empty when unknown."""
    canonical = get_canonical(term)
    if canonical is None:
        return []
    return [canonical, *SYNONYMS[canonical]]


def are_synonyms(a: str, b: str) -> bool:
    """True if both normalize to the same text or share a canonical form."""
    norm_a = normalize_for_synonym(a)
    norm_b = normalize_for_synonym(b)
    if norm_a == norm_b:
        return True

    canonical_a = REVERSE_LOOKUP.get(norm_a)
    canonical_b = REVERSE_LOOKUP.get(norm_b)
    return canonical_a is not None and canonical_a == canonical_b


def tokens_match_any_order(words_a: list[str], words_b: list[str]) -> bool:
    """
    Compare meaningful tokens regardless of order.

    Stop words are dropped and the rest sorted; every position must then be
    equal or synonymous.
    """
    meaningful_a = sorted(strip_stop_words(words_a))
    meaningful_b = sorted(strip_stop_words(words_b))
    if not meaningful_a or len(meaningful_a) != len(meaningful_b):
        return False
    return all(
        x == y or are_synonyms(x, y) for x, y in zip(meaningful_a, meaningful_b, strict=True)
    )


def are_phrase_synonyms(a: str, b: str) -> bool:
    """
    Check whether two phrases are equivalent.

    Handles word order flexibility (e.g. "war world 2" vs "World War II").
    """
    if are_synonyms(a, b):
        return True

    words_a = tokenize(normalize_for_synonym(a))
    words_b = tokenize(normalize_for_synonym(b))
    if len(words_a) <= 1 and len(words_b) <= 1:
        return False

    return tokens_match_any_order(words_a, words_b)


def get_synonym_similarity(a: str, b: str) -> float:
    """
    Proportion of words in one phrase that have a match in the other.

    Returns 0.95 for a full phrase match, otherwise matched / max word count,
    matching greedily without reusing a word of `b`.
    """
    words_a = tokenize(normalize_for_synonym(a))
    words_b = tokenize(normalize_for_synonym(b))
    if not words_a or not words_b:
        return 0.0

    if are_phrase_synonyms(a, b):
        return 0.95

    matched = 0
    used: set[int] = set()
    for word in words_a:
        for j, other in enumerate(words_b):
            if j in used:
                continue
            if word == other or are_synonyms(word, other):
                matched += 1
                used.add(j)
                break

    return matched / max(len(words_a), len(words_b))
