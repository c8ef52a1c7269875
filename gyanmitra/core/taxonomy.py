"""
Subject and language taxonomy.

The answer service names subjects differently from the client, so requests
are translated through a fixed lookup table. Language resolution lives here
too because both the query flow and the profile endpoints validate against
the same vocabulary.

Dependencies: None (pure domain layer)
System role: Client/service vocabulary mapping
"""

DEFAULT_LANGUAGE = "english"

SUPPORTED_LANGUAGES: tuple[str, ...] = ("english", "hindi", "marathi", "urdu")

# Client-facing subject values accepted on queries.
SUPPORTED_SUBJECTS: tuple[str, ...] = (
    "math",
    "mathematics",
    "science",
    "social_science",
    "social_studies",
    "english",
    "hindi",
    "sanskrit",
)

# Subjects a profile may list.
PROFILE_SUBJECTS: tuple[str, ...] = (
    "math",
    "science",
    "social_science",
    "english",
    "hindi",
    "sanskrit",
)

SUBJECT_MAPPING: dict[str, str] = {
    "math": "mathematics",
    "mathematics": "mathematics",
    "science": "science",
    "social_science": "social_studies",
    "social_studies": "social_studies",
    "english": "english",
    "hindi": "hindi",
    "sanskrit": "sanskrit",
}

MIN_GRADE = 5
MAX_GRADE = 10


def is_supported_subject(subject: str | None) -> bool:
    """Check a client subject value case-insensitively."""
    return bool(subject) and subject.strip().lower() in SUPPORTED_SUBJECTS


def is_supported_language(language: str | None) -> bool:
    """Check a language value case-insensitively."""
    return bool(language) and language.strip().lower() in SUPPORTED_LANGUAGES


def map_subject(subject: str) -> str:
    """
    Translate a client subject into the answer service's vocabulary.

    Lookup is case-insensitive; unmapped values pass through lower-cased.
    Canonical service names map to themselves, so mapping twice is a no-op.

    Args:
        subject: Client subject value

    Returns:
        str: Service subject value
    """
    key = subject.strip().lower()
    return SUBJECT_MAPPING.get(key, key)


def resolve_language(
    profile_language: str | None,
    request_language: str | None,
) -> str:
    """
    Resolve the effective language for a query.

    The stored profile preference wins over the request, which wins over
    the default. Profile preference is sticky across all conversations.

    Args:
        profile_language: User's stored preferred language, if any
        request_language: Language sent with the request, if any

    Returns:
        str: Lower-cased effective language
    """
    for candidate in (profile_language, request_language):
        if candidate and candidate.strip():
            return candidate.strip().lower()
    return DEFAULT_LANGUAGE
