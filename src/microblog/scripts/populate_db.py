"""Utility script to create the schema and load sample users and posts."""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from microblog.core.security import hash_identity
from microblog.db.session import SessionLocal, create_tables, drop_tables
from microblog.models import Post, User, UserStatus

logger = logging.getLogger("microblog.scripts.populate_db")

SAMPLE_USERS: list[dict[str, object]] = [
    {"username": "PoetLover", "member_since": datetime(2024, 1, 1, 8, 0, tzinfo=UTC)},
    {"username": "VerseSeeker", "member_since": datetime(2024, 1, 2, 9, 0, tzinfo=UTC)},
    {"username": "HistoryScribe", "member_since": datetime(2024, 1, 3, 10, 30, tzinfo=UTC)},
    {"username": "NightMuse", "member_since": datetime(2024, 1, 4, 11, 45, tzinfo=UTC)},
    {"username": "CelestialBard", "member_since": datetime(2024, 1, 5, 13, 20, tzinfo=UTC)},
]

SAMPLE_POSTS: list[dict[str, object]] = [
    {
        "title": "Whispers of the Wind",
        "content": (
            "In the hush of twilight's embrace,\nWhispers of the wind take flight.\n"
            "Through the trees, they softly trace,\nA symphony of the night."
        ),
        "author": "PoetLover",
        "timestamp": datetime(2024, 1, 1, 10, 0, tzinfo=UTC),
    },
    {
        "title": "Reflections of Time",
        "content": (
            "Upon the lake of memory,\nTime casts its gentle ripples wide.\n"
            "Each moment, a fleeting reverie,\nReflects the paths we stride."
        ),
        "author": "VerseSeeker",
        "timestamp": datetime(2024, 1, 2, 12, 0, tzinfo=UTC),
    },
    {
        "title": "Echoes of the Past",
        "content": (
            "In ancient halls of silent stone,\nEchoes of the past remain.\n"
            "Whispering tales of the unknown,\nIn a soft, eternal refrain."
        ),
        "author": "HistoryScribe",
        "timestamp": datetime(2024, 1, 3, 14, 30, tzinfo=UTC),
    },
    {
        "title": "Moonlit Dreams",
        "content": (
            "Beneath the moon's gentle glow,\nDreams unfold in silver light.\n"
            "In the stillness, shadows grow,\nWeaving tales into the night."
        ),
        "author": "NightMuse",
        "timestamp": datetime(2024, 1, 4, 9, 45, tzinfo=UTC),
    },
    {
        "title": "Serenade of the Stars",
        "content": (
            "Stars above in their celestial dance,\nSing a song of endless night.\n"
            "In their glow, our hearts enhance,\nA serenade of pure delight."
        ),
        "author": "CelestialBard",
        "timestamp": datetime(2024, 1, 5, 18, 20, tzinfo=UTC),
    },
]


def populate(db: Session) -> tuple[int, int]:
    """Insert sample users and posts that are not present yet.

    Returns:
        ``(users_created, posts_created)``
    """
    users_by_name: dict[str, User] = {}
    users_created = 0
    for sample in SAMPLE_USERS:
        username = str(sample["username"])
        user = db.query(User).filter(User.username == username).first()
        if user is None:
            user = User(
                username=username,
                identity_hash=hash_identity(f"sample:{username}"),
                status=UserStatus.ESTABLISHED,
                member_since=sample["member_since"],
            )
            db.add(user)
            users_created += 1
        users_by_name[username] = user
    db.flush()

    posts_created = 0
    for sample in SAMPLE_POSTS:
        author = users_by_name[str(sample["author"])]
        exists = (
            db.query(Post)
            .filter(Post.author_id == author.id, Post.title == sample["title"])
            .first()
        )
        if exists is not None:
            continue
        db.add(
            Post(
                title=sample["title"],
                content=sample["content"],
                author=author.username,
                author_id=author.id,
                timestamp=sample["timestamp"],
                edited=False,
                like_count=0,
            )
        )
        posts_created += 1

    db.commit()
    return users_created, posts_created


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create tables and load sample data")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop every table before recreating and populating the schema.",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    try:
        if args.reset:
            drop_tables()
            logger.info("Dropped all tables")
        create_tables()
        with SessionLocal() as db:
            users_created, posts_created = populate(db)
    except SQLAlchemyError:
        logger.error("Failed to populate database", exc_info=True)
        return 1

    logger.info("Database populated: %d user(s), %d post(s) added", users_created, posts_created)
    return 0


if __name__ == "__main__":
    sys.exit(main())
