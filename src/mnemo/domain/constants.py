"""Centralized constants for the mnemo engine.

All magic numbers and tuning defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
DEFAULT_EASE = 2.5
DEFAULT_INTERVAL_DAYS = 1.0
MIN_EASE = 1.3
LAPSE_GRADE = 3  # grades below this count as a lapse

# ---------- Evaluator scores ----------
EXACT_SCORE = 1.0
SYNONYM_SCORE = 0.95
WORD_ORDER_SCORE = 0.9
TYPO_SCORE = 0.9
PARTIAL_BASE_SCORE = 0.6
PARTIAL_SPAN = 0.2
SYNONYM_SIMILARITY_MIN = 0.7
FUZZY_MIN = 0.5

# ---------- Evaluator classification ----------
CORRECT_THRESHOLD = 0.9
CLOSE_THRESHOLD = 0.6
SHORT_ANSWER_MAX_WORDS = 4

# ---------- AI fallback ----------
AI_UNCERTAIN_LOW = 0.4
AI_UNCERTAIN_HIGH = 0.9
AI_TIMEOUT = 10.0  # seconds
AI_MAX_TOKENS = 150
AI_VERDICT_SCORES = {"YES": 0.95, "PARTIAL": 0.7, "NO": 0.3}

# ---------- Difficulty inference ----------
QUICK_RESPONSE_MS = 5000
NORMAL_RESPONSE_MS = 15000
SLOW_RESPONSE_MS = 30000
WRONG_SCORE = 0.5
PARTIAL_SCORE = 0.7
WELL_KNOWN_INTERVAL_DAYS = 7
WELL_KNOWN_TIME_FACTOR = 0.9
