from .posts import posts_router

__all__ = ["posts_router"]
