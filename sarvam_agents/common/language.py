"""
Language Code Helpers

Sarvam endpoints expect BCP-47 style regional codes ("hi-IN", "en-IN").
Callers frequently pass bare ISO 639-1 codes, so those are mapped to the
Indian regional variant before a request is built.
"""

from typing import Any

# Bare code -> Sarvam regional code
_REGIONAL_CODES = {
    "en": "en-IN",
    "hi": "hi-IN",
    "bn": "bn-IN",
    "gu": "gu-IN",
    "kn": "kn-IN",
    "ml": "ml-IN",
    "mr": "mr-IN",
    "od": "od-IN",
    "or": "od-IN",  # ISO 639-1 Odia; Sarvam uses "od"
    "pa": "pa-IN",
    "ta": "ta-IN",
    "te": "te-IN",
}


def map_language_code(lang_code: Any) -> Any:
    """Map a generic language code to its Sarvam regional code.

    Non-string values and codes that are already regional (or unknown) are
    returned unchanged.

    Args:
        lang_code: Input language code, e.g. "hi" or "hi-IN"

    Returns:
        The mapped code, e.g. "hi-IN"
    """
    if not isinstance(lang_code, str):
        return lang_code
    return _REGIONAL_CODES.get(lang_code.lower(), lang_code)
