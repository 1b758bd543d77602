from .BaseModel import BaseModel, Base
from .Translation import Translation
from .Observer import ModelObserver, ObserverRegistry, observer_registry, observe
from .Post import Post

__all__ = [
    "BaseModel",
    "Base",
    "Translation",
    "ModelObserver",
    "ObserverRegistry",
    "observer_registry",
    "observe",
    "Post",
]
