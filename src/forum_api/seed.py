"""Demo data loader.

Users are never created through the API; run ``forum-seed`` to create the
schema and load the demo users, posts, comments and flags into an empty
database. Every demo user's password is ``password``; alberto and bob are
admins sharing the TOTP secret below.
"""

import asyncio
import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from forum_api.database import async_session, create_all
from forum_api.models import Comment, InterestingFlag, Post, User
from forum_api.utils.security import generate_salt, hash_password

logger = logging.getLogger(__name__)

SEED_PASSWORD = "password"
ADMIN_TOTP_SECRET = "LXBSMDTMSP2I5XFXIYRGFVWSFI"

# (id, username, is_admin, totp_secret)
USERS = [
    (1, "alberto", True, ADMIN_TOTP_SECRET),
    (2, "bob", True, ADMIN_TOTP_SECRET),
    (3, "carl", False, None),
    (4, "diana", False, None),
    (5, "emma", False, None),
]

# (id, title, user_id, max_comments, created_at, text)
POSTS = [
    (
        1,
        "The Quantum Leap in Computing",
        1,
        4,
        "2015-01-01 10:21:27",
        (
            "The future of technology is about to get a major upgrade. Quantum computing "
            "promises to solve problems currently intractable for even the most powerful "
            "supercomputers. From drug discovery to financial modeling, the potential "
            "applications are mind-boggling. Are we ready for this paradigm shift?"
        ),
    ),
    (
        2,
        "Deciphering Dark Matter",
        1,
        9,
        "2013-01-02 09:53:01",
        (
            "The universe holds many secrets, and dark matter is one of the biggest. While "
            "we cannot see it, its gravitational effects are undeniable. Scientists "
            "worldwide are racing to detect and understand this mysterious substance, which "
            "makes up about 27% of the universe. What if we finally crack the code?"
        ),
    ),
    (
        3,
        "The Ethical Dilemmas of AI",
        2,
        None,
        "2014-01-03 19:44:02",
        (
            "As AI becomes more sophisticated, so do the ethical questions surrounding it. "
            "Who is responsible when an AI makes a mistake? How do we ensure fairness and "
            "prevent bias in algorithms? These aren not just theoretical debates; they are "
            "becoming pressing societal challenges we need to address now."
        ),
    ),
    (
        4,
        "Unveiling the Oceans Depths",
        2,
        12,
        "2011-01-03 20:54:27",
        (
            "Our oceans are vast and largely unexplored, hiding countless species and "
            "geological wonders. New deep-sea technologies are allowing us to venture "
            "further than ever before, revealing ecosystems that thrive without sunlight and "
            "shedding light on Earth own history. What incredible discoveries await us?"
        ),
    ),
    (
        5,
        "Genetic Engineering: Promise and Peril",
        3,
        5,
        "2012-01-01 18:43:27",
        (
            "CRISPR technology has revolutionized genetic engineering, offering the "
            "potential to cure diseases and enhance human traits. But with great power comes "
            "great responsibility. The ability to alter our very blueprint raises profound "
            "ethical and societal questions. Where do we draw the line?"
        ),
    ),
    (
        6,
        "The Science of Sleep",
        3,
        5,
        "2015-02-04 06:16:59",
        (
            "Sleep is not just about resting; it is a vital biological process essential for "
            "physical and mental health. Research is continuously uncovering the intricate "
            "mechanisms behind sleep, revealing its role in memory consolidation, emotional "
            "regulation, and even cellular repair. Prioritizing sleep is truly a scientific "
            "imperative!"
        ),
    ),
    (
        7,
        "Exoplanets: Searching for Life Beyond Earth",
        4,
        None,
        "2012-04-06 23:14:55",
        (
            "The discovery of thousands of exoplanets has ignited the search for "
            "extraterrestrial life. Telescopes like James Webb are analyzing distant "
            "atmospheres for biosignatures chemical hints of life. The possibility of "
            "finding another inhabited world is no longer just science fiction."
        ),
    ),
    (
        8,
        "The Future of Renewable Energy",
        4,
        None,
        "2013-04-06 22:44:11",
        (
            "Tackling climate change requires a rapid transition to renewable energy. Solar, "
            "wind, and geothermal technologies are constantly improving, becoming more "
            "efficient and affordable. The challenge now is scaling these solutions globally "
            "and integrating them into existing energy grids. The future is bright, and its "
            "powered by renewables!"
        ),
    ),
    (
        9,
        "Bio-inspiration: Learning from Nature",
        5,
        4,
        "2014-09-23 16:55:00",
        (
            "Nature is the ultimate engineer. Scientists and engineers are increasingly "
            "turning to biological systems for inspiration, developing new materials, "
            "robots, and technologies based on principles observed in plants, animals, and "
            "even microorganisms. From gecko-inspired adhesives to self-healing materials, "
            "nature provides endless brilliant ideas."
        ),
    ),
]

# (id, text, created_at, user_id, post_id)
COMMENTS = [
    (1, "Absolutely fascinating! This really makes you think.", "2015-12-01 11:21:27", 2, 1),
    (2, "Great points raised here. So much to consider.", "2015-10-04 14:44:56", None, 1),
    (
        3,
        "I have been wondering about this topic lately. Thanks for the insights!",
        "2015-12-05 12:01:09",
        4,
        1,
    ),
    (
        4,
        "This truly breaks down a complex subject into digestible pieces. Well done.",
        "2013-11-04 09:12:01",
        4,
        2,
    ),
    (
        5,
        "Thought-provoking! I am definitely going to dive deeper into this.",
        "2013-10-22 05:43:06",
        3,
        2,
    ),
    (6, "Could not agree more with these observations.", "2013-10-13 16:55:09", None, 2),
    (7, "A really insightful take. It offers a fresh perspective.", "2014-12-05 07:46:07", 1, 3),
    (8, "This sparked a few new ideas for me. Appreciate it!", "2014-11-12 05:44:00", 2, 3),
    (9, "Fantastic read! It is rare to find such clarity on this.", "2014-12-05 04:11:52", None, 3),
    (10, "This is exactly the kind of discussion we need more of.", "2011-09-28 22:55:11", 4, 4),
    (11, "Very compelling arguments. You have convinced me!", "2011-08-06 20:45:07", 5, 4),
    (12, "I found myself nodding along the whole time. Spot on.", "2011-12-25 20:33:47", None, 4),
    (
        13,
        "This topic is so crucial right now. Thanks for addressing it.",
        "2012-10-07 12:00:12",
        1,
        5,
    ),
    (14, "Always learning something new from posts like this.", "2012-10-04 08:54:44", 3, 5),
    (15, "What a brilliant way to frame the issue.", "2012-12-01 01:41:27", None, 5),
    (
        16,
        (
            "This is a really insightful piece. It makes you pause and consider things from "
            "a different angle."
        ),
        "2015-06-01 08:22:11",
        None,
        6,
    ),
    (
        17,
        (
            "Spot on! I have been thinking about this a lot lately, and you have articulated "
            "it perfectly."
        ),
        "2015-04-01 11:44:01",
        None,
        6,
    ),
    (
        18,
        "Such a clear and concise explanation of a complex topic. Much appreciated!",
        "2015-11-01 03:45:21",
        None,
        6,
    ),
    (19, "A powerful message delivered with precision.", "2012-09-08 04:15:23", 1, 7),
    (20, "It is refreshing to see such a well-articulated argument.", "2012-10-10 12:16:46", 3, 7),
    (21, "This resonates deeply with my own thoughts.", "2012-10-11 22:17:04", None, 7),
    (22, "An excellent contribution to the conversation.", "2013-09-06 06:44:23", 5, 8),
    (23, "This is the kind of content that truly adds value.", "2013-08-12 12:35:11", 5, 8),
    (
        24,
        "I am already looking forward to more discussions on this!",
        "2013-11-03 09:44:56",
        None,
        8,
    ),
    (25, "Perfectly summarized. No wasted words.", "2014-11-23 14:12:01", 1, 9),
    (26, "This opened my eyes to a few things I had not considered.", "2014-10-23 18:34:02", 3, 9),
    (27, "So much wisdom packed into these lines.", "2014-12-23 19:56:03", None, 9),
]

# (user_id, comment_id)
FLAGS = [
    (1, 4),
    (1, 11),
    (2, 11),
    (2, 14),
    (3, 14),
    (3, 17),
    (4, 17),
    (4, 18),
    (4, 23),
    (5, 27),
]


def _timestamp(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%d %H:%M:%S")


async def seed_database(db: AsyncSession, password: str = SEED_PASSWORD) -> None:
    """Insert the demo data. The tables are expected to be empty."""
    for user_id, username, is_admin, secret in USERS:
        salt = generate_salt()
        db.add(
            User(
                id=user_id,
                username=username,
                salt=salt,
                hashed_password=hash_password(password, salt),
                totp_secret=secret,
                is_admin=is_admin,
            )
        )
    await db.flush()

    for post_id, title, user_id, max_comments, created_at, text in POSTS:
        db.add(
            Post(
                id=post_id,
                title=title,
                text=text,
                user_id=user_id,
                max_comments=max_comments,
                created_at=_timestamp(created_at),
            )
        )
    await db.flush()

    for comment_id, text, created_at, user_id, post_id in COMMENTS:
        db.add(
            Comment(
                id=comment_id,
                text=text,
                user_id=user_id,
                post_id=post_id,
                created_at=_timestamp(created_at),
            )
        )
    await db.flush()

    for user_id, comment_id in FLAGS:
        db.add(InterestingFlag(user_id=user_id, comment_id=comment_id))
    await db.flush()


async def _seed() -> None:
    await create_all()
    async with async_session() as db:
        existing = await db.execute(select(func.count()).select_from(User))
        if existing.scalar_one():
            logger.info("Database already contains users - skipping seed")
            return
        await seed_database(db)
        await db.commit()
    logger.info(
        "Seeded %d users, %d posts, %d comments, %d flags",
        len(USERS),
        len(POSTS),
        len(COMMENTS),
        len(FLAGS),
    )


def main() -> None:
    """Entry point for the ``forum-seed`` console script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(_seed())


if __name__ == "__main__":
    main()
