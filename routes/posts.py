from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing_extensions import Annotated

from app.Http.Schemas import PostTitlesResponse, TranslatedPostResponse, TranslationCompleteness
from app.Models import Post
from app.Services.TranslatableService import translatable
from config import get_database

posts_router = APIRouter(prefix="/posts", tags=["Posts"])


@posts_router.get("/", response_model=PostTitlesResponse)
async def list_posts(db: Annotated[Session, Depends(get_database)]) -> PostTitlesResponse:
    """Post titles in the request locale, keyed by slug."""
    return PostTitlesResponse(
        locale=translatable().get_current_locale(),
        titles=Post.pluck_translated_with_fallback(db, 'title', key='slug'),
    )


@posts_router.get("/{post_id}", response_model=TranslatedPostResponse)
async def show_post(post_id: str, db: Annotated[Session, Depends(get_database)]) -> TranslatedPostResponse:
    post = db.get(Post, post_id)
    if post is None or post.trashed:
        raise HTTPException(status_code=404, detail="Post not found")

    post.load_translations()
    return TranslatedPostResponse(
        id=post.id,
        slug=post.slug,
        title=post.get_attribute('title'),
        content=post.get_attribute('content'),
        excerpt=post.get_attribute('excerpt'),
        locale=translatable().get_current_locale(),
        completeness=TranslationCompleteness(**post.get_translation_completeness()),
    )
