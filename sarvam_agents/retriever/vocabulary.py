"""
Core-term vocabulary for the documentation retriever.

Each key is a canonical multi-word (or compound) Sarvam concept; the value
lists extra surface forms that count as the same term. The hyphenated
spelling of a multi-word key ("text to speech" -> "text-to-speech") is
always accepted and does not need to be listed.

Order matters: recognised core terms are reported in vocabulary order.
"""

from typing import Dict, List

DEFAULT_CORE_TERMS: Dict[str, List[str]] = {
    "speech to text translate": ["stt translate", "speech-to-text-translate"],
    "speech to text": ["stt", "transcription"],
    "text to speech": ["tts"],
    "language identification": ["language detection", "identify language", "text-lid"],
    "call analytics": [],
    "text analytics": [],
    "document translation": ["translate pdf", "translatepdf"],
    "pdf parsing": ["parse pdf", "parsepdf", "sarvam parse"],
    "api key": ["subscription key", "api-subscription-key"],
    "rate limits": ["rate limit"],
    "language codes": ["language code"],
    "batch api": ["batch"],
    "chat completion": ["chat completions"],
}
