# tests/test_post_service.py
"""Tests for post and account operations in the service layer."""

import pytest

from microblog.core.settings import settings
from microblog.models import Post, PostLike
from microblog.services import post_service
from microblog.services.errors import (
    AuthenticationRequired,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)


def test_create_then_fetch_round_trips(post_repo, alice) -> None:
    created = post_service.create_post(post_repo, alice, title="Hello", content="World")

    fetched = post_service.get_post(post_repo, created.id)
    assert (fetched.title, fetched.content) == ("Hello", "World")
    assert fetched.author == "alice"
    assert fetched.author_id == alice.id
    assert fetched.like_count == 0
    assert fetched.edited is False
    assert fetched.timestamp.tzinfo is not None


def test_create_trims_title_and_content(post_repo, alice) -> None:
    post = post_service.create_post(post_repo, alice, title="  Hi  ", content="\n body \n")
    assert (post.title, post.content) == ("Hi", "body")


def test_create_requires_established_user(post_repo, provisional_user) -> None:
    with pytest.raises(AuthenticationRequired):
        post_service.create_post(post_repo, None, title="t", content="c")
    with pytest.raises(AuthorizationError) as exc:
        post_service.create_post(post_repo, provisional_user, title="t", content="c")
    assert exc.value.reason == "username_required"
    assert post_repo.list_posts() == []


@pytest.mark.parametrize(
    ("title", "content", "reason"),
    [
        ("", "c", "empty_title"),
        ("   ", "c", "empty_title"),
        ("t", "", "empty_content"),
        ("x" * 201, "c", "title_too_long"),
        ("t", "x" * 5001, "content_too_long"),
    ],
)
def test_create_rejects_invalid_text(post_repo, alice, title, content, reason) -> None:
    with pytest.raises(ValidationError) as exc:
        post_service.create_post(post_repo, alice, title=title, content=content)
    assert exc.value.reason == reason
    assert post_repo.list_posts() == []


def test_alice_and_bob_scenario(post_repo, alice, bob) -> None:
    post = post_service.create_post(post_repo, alice, title="Hello", content="World")
    post_id = post.id
    created_at = post.timestamp

    liked = post_service.like_post(post_repo, bob, post_id)
    assert liked.like_count == 1

    with pytest.raises(AuthorizationError) as self_like:
        post_service.like_post(post_repo, alice, post_id)
    assert self_like.value.reason == "self_like"
    assert post_service.get_post(post_repo, post_id).like_count == 1

    with pytest.raises(AuthorizationError) as foreign_edit:
        post_service.edit_post(post_repo, bob, post_id, title="Mine", content="now")
    assert foreign_edit.value.reason == "not_author"

    edited = post_service.edit_post(post_repo, alice, post_id, title="Hello!", content="World!")
    assert (edited.title, edited.content) == ("Hello!", "World!")
    assert edited.edited is True
    assert edited.timestamp >= created_at
    assert edited.like_count == 1


def test_edit_checks_rights_before_validating(post_repo, make_post, alice, bob) -> None:
    post = make_post(alice)
    with pytest.raises(AuthorizationError):
        post_service.edit_post(post_repo, bob, post.id, title="", content="")


def test_edit_rejects_empty_text(post_repo, make_post, alice) -> None:
    post = make_post(alice, title="Keep", content="Me")
    with pytest.raises(ValidationError) as exc:
        post_service.edit_post(post_repo, alice, post.id, title="ok", content="  ")
    assert exc.value.reason == "empty_content"
    unchanged = post_service.get_post(post_repo, post.id)
    assert (unchanged.title, unchanged.content, unchanged.edited) == ("Keep", "Me", False)


def test_missing_post_is_not_found(post_repo, alice) -> None:
    for call in (
        lambda: post_service.get_post(post_repo, 999),
        lambda: post_service.like_post(post_repo, alice, 999),
        lambda: post_service.edit_post(post_repo, alice, 999, title="t", content="c"),
        lambda: post_service.delete_post(post_repo, alice, 999),
    ):
        with pytest.raises(NotFoundError) as exc:
            call()
        assert exc.value.reason == "post_not_found"


def test_repeat_likes_count_by_default(post_repo, make_post, alice, bob) -> None:
    post = make_post(alice)
    post_service.like_post(post_repo, bob, post.id)
    assert post_service.like_post(post_repo, bob, post.id).like_count == 2


def test_repeat_likes_rejected_when_disabled(monkeypatch, post_repo, make_post, alice, bob) -> None:
    monkeypatch.setattr(settings, "allow_repeat_likes", False)
    post = make_post(alice)

    assert post_service.like_post(post_repo, bob, post.id).like_count == 1
    with pytest.raises(ValidationError) as exc:
        post_service.like_post(post_repo, bob, post.id)

    assert exc.value.reason == "already_liked"
    assert post_service.get_post(post_repo, post.id).like_count == 1
    assert post_repo.has_liked(post.id, bob.id)


def test_delete_post_then_delete_again(post_repo, make_post, alice, bob) -> None:
    post = make_post(alice)
    post_id = post.id

    with pytest.raises(AuthorizationError):
        post_service.delete_post(post_repo, bob, post_id)

    post_service.delete_post(post_repo, alice, post_id)
    newer_id = make_post(alice, title="newer").id
    assert newer_id != post_id

    with pytest.raises(NotFoundError):
        post_service.get_post(post_repo, post_id)
    with pytest.raises(NotFoundError):
        post_service.delete_post(post_repo, alice, post_id)
    assert post_service.get_post(post_repo, newer_id).title == "newer"


def test_feed_and_profile_ordering(post_repo, make_post, alice, bob) -> None:
    first = make_post(alice, title="first")
    second = make_post(bob, title="second")
    third = make_post(alice, title="third")
    post_service.like_post(post_repo, alice, second.id)

    assert [p.id for p in post_service.list_feed(post_repo)] == [third.id, second.id, first.id]
    assert [p.id for p in post_service.list_feed(post_repo, "likes-desc")][0] == second.id
    assert [p.id for p in post_service.list_profile(post_repo, alice, "recency-asc")] == [
        first.id,
        third.id,
    ]


def test_profile_requires_established_user(post_repo, provisional_user) -> None:
    with pytest.raises(AuthenticationRequired):
        post_service.list_profile(post_repo, None)
    with pytest.raises(AuthorizationError):
        post_service.list_profile(post_repo, provisional_user)


def test_delete_account_removes_user_posts_and_likes(
    monkeypatch, db_session, user_repo, post_repo, make_post, alice, bob
) -> None:
    monkeypatch.setattr(settings, "allow_repeat_likes", False)
    alice_id, bob_id = alice.id, bob.id
    alice_post_ids = [make_post(alice).id, make_post(alice).id]
    bob_post = make_post(bob)
    bob_post_id = bob_post.id
    post_service.like_post(post_repo, bob, alice_post_ids[0])
    post_service.like_post(post_repo, alice, bob_post_id)

    removed = post_service.delete_account(user_repo, post_repo, alice)

    assert removed == 2
    assert user_repo.get_by_id(alice_id) is None
    assert user_repo.get_by_username("alice") is None
    for post_id in alice_post_ids:
        assert post_repo.get_by_id(post_id) is None
    assert db_session.query(PostLike).filter(PostLike.user_id == alice_id).count() == 0
    assert db_session.query(PostLike).filter(PostLike.user_id == bob_id).count() == 0
    remaining = db_session.query(Post).all()
    assert [p.id for p in remaining] == [bob_post_id]
    assert remaining[0].like_count == 1


def test_delete_account_requires_established_user(user_repo, post_repo, provisional_user) -> None:
    with pytest.raises(AuthenticationRequired):
        post_service.delete_account(user_repo, post_repo, None)
    with pytest.raises(AuthorizationError):
        post_service.delete_account(user_repo, post_repo, provisional_user)
