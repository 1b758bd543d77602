from .Facade import Facade
from .Translatable import Translatable

__all__ = ["Facade", "Translatable"]
