from .PostSchemas import (
    TranslationCompleteness,
    PostTitlesResponse,
    TranslatedPostResponse
)

__all__ = [
    "TranslationCompleteness",
    "PostTitlesResponse",
    "TranslatedPostResponse",
]
