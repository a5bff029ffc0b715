from .sarvam_api import (
    SarvamAPIAdapter,
    SarvamAPIError,
    SarvamInputError,
    write_wav,
)

__all__ = [
    "SarvamAPIAdapter",
    "SarvamAPIError",
    "SarvamInputError",
    "write_wav",
]
