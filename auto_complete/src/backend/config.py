import os

# Suggestion list cap
MAX_SUGGESTIONS: int = 5

# /* ~~~ per-source caps before the merge ~~~ */
STORE_COMPLETION_LIMIT: int = 3
CONTEXT_SCAN_LIMIT: int = 10      # ContextRecords examined for followers
CONTEXT_FOLLOWER_LIMIT: int = 3
GENERATIVE_CANDIDATES: int = 5

# Word boundaries: characters that terminate an in-progress word
BOUNDARY_CHARS: frozenset[str] = frozenset({" ", ".", ",", "!", "?"})
EXTENDED_BOUNDARY_CHARS: frozenset[str] = BOUNDARY_CHARS | {"\n", "\t"}

# Boundaries that close a sentence (typed text is stored as a context)
SENTENCE_TERMINATORS: frozenset[str] = frozenset({".", "!", "?"})
RECORD_TYPED_CONTEXTS: bool = os.environ.get("AUTOCOMPLETE_RECORD_CONTEXTS", "1") == "1"

# Storage DSN: "sqlite:///path/to/words.sqlite" or "memory://"
DB_DSN: str = os.environ.get("AUTOCOMPLETE_DB", "memory://")

# /* ~~~ generative service (OpenAI-compatible chat completions) ~~~ */
OPENAI_BASE_URL: str = os.environ.get("OPENAI_BASE_URL", "https://api.openai.com")
OPENAI_API_KEY: str = os.environ.get("OPENAI_API_KEY", "")
GENERATIVE_MODEL: str = os.environ.get("AUTOCOMPLETE_MODEL", "gpt-3.5-turbo")
GENERATIVE_TIMEOUT_S: float = float(os.environ.get("AUTOCOMPLETE_GENERATIVE_TIMEOUT", "3.0"))
STORE_TIMEOUT_S: float = float(os.environ.get("AUTOCOMPLETE_STORE_TIMEOUT", "2.0"))

# /* ~~~ transcription service ~~~ */
TRANSCRIPTION_MODEL: str = os.environ.get("AUTOCOMPLETE_TRANSCRIPTION_MODEL", "whisper-1")
TRANSCRIPTION_TIMEOUT_S: float = float(os.environ.get("AUTOCOMPLETE_TRANSCRIPTION_TIMEOUT", "30"))
# Text used when transcription fails; empty disables the fallback
TRANSCRIPTION_FALLBACK: str = os.environ.get("AUTOCOMPLETE_TRANSCRIPTION_FALLBACK", "")
MAX_AUDIO_BYTES: int = 10 * 1024 * 1024

# Session id used when the caller does not send one
DEFAULT_SESSION: str = "default"

# Worker threads per suggestion source; the two pools are separate
STORE_WORKERS: int = 4
GENERATIVE_WORKERS: int = 8

# Live text sessions kept in memory; the least recently used is evicted past this
MAX_SESSIONS: int = int(os.environ.get("AUTOCOMPLETE_MAX_SESSIONS", "1000"))
