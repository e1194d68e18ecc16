# src/microblog/api/v1/endpoints/posts.py
"""Post and feed endpoints for the Microblog API."""

from fastapi import APIRouter, Query, status

from microblog.api.v1.dependencies import EstablishedUserDep, OptionalUserDep, PostRepoDep
from microblog.core.settings import settings
from microblog.schemas.post import LikeResponse, PostCreate, PostOut, PostUpdate
from microblog.services import post_service

router = APIRouter(tags=["posts"])


@router.get("/feed", response_model=list[PostOut])
def get_feed(
    posts: PostRepoDep,
    sort: str | None = Query(None, description="recency-desc, recency-asc, likes-desc or likes-asc"),
) -> list[PostOut]:
    """List every post in the requested order.

    Unknown sort values fall back to newest first.
    """
    ranked = post_service.list_feed(posts, sort or settings.default_sort)
    return [post_service.to_post_out(post) for post in ranked]


@router.post("/posts", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    current_user: EstablishedUserDep,
    posts: PostRepoDep,
) -> PostOut:
    """Publish a post authored by the caller."""
    post = post_service.create_post(
        posts,
        current_user,
        title=payload.title,
        content=payload.content,
    )
    return post_service.to_post_out(post)


@router.get("/posts/{post_id}", response_model=PostOut)
def get_post(post_id: int, posts: PostRepoDep) -> PostOut:
    """Return a single post."""
    return post_service.to_post_out(post_service.get_post(posts, post_id))


@router.put("/posts/{post_id}", response_model=PostOut)
def edit_post(
    post_id: int,
    payload: PostUpdate,
    current_user: OptionalUserDep,
    posts: PostRepoDep,
) -> PostOut:
    """Replace the title and content of the caller's own post."""
    post = post_service.edit_post(
        posts,
        current_user,
        post_id,
        title=payload.title,
        content=payload.content,
    )
    return post_service.to_post_out(post)


@router.post("/posts/{post_id}/like", response_model=LikeResponse)
def like_post(
    post_id: int,
    current_user: OptionalUserDep,
    posts: PostRepoDep,
) -> LikeResponse:
    """Like someone else's post."""
    post = post_service.like_post(posts, current_user, post_id)
    return LikeResponse(post_id=post.id, like_count=post.like_count)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    current_user: OptionalUserDep,
    posts: PostRepoDep,
) -> None:
    """Delete the caller's own post."""
    post_service.delete_post(posts, current_user, post_id)
