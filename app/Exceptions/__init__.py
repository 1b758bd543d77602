from .TranslatableException import (
    TranslatableException,
    InvalidLocaleException,
    SchemaProbeException,
    ModelNotPersistedException,
)

__all__ = [
    "TranslatableException",
    "InvalidLocaleException",
    "SchemaProbeException",
    "ModelNotPersistedException",
]
