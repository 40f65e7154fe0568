#!/usr/bin/env python3
"""
Seed data script for development and testing
"""
import asyncio
import random
import sys
import uuid
from pathlib import Path

# Add the project root to the Python path
current_dir = Path(__file__).parent
root_dir = current_dir.parent
sys.path.insert(0, str(root_dir))

# Stable identity keys so re-running the seed finds the same profiles
SEED_NAMESPACE = uuid.UUID("6f1c9a52-3f0e-4a8e-9d8b-7a1e2c4b5d60")

SAMPLE_PROFILES = [
    {
        "handle": "alice_dev",
        "name": "Alice Johnson",
        "bio": "Full-stack developer | Coffee enthusiast | Building cool things",
        "is_admin": True,
    },
    {
        "handle": "bob_designer",
        "name": "Bob Smith",
        "bio": "UI/UX Designer | Making the web beautiful",
    },
    {
        "handle": "charlie_tech",
        "name": "Charlie Brown",
        "bio": "Tech blogger | Startup founder | Always learning",
    },
    {
        "handle": "diana_data",
        "name": "Diana Prince",
        "bio": "Data scientist | ML engineer | AI enthusiast",
    },
]

SAMPLE_POSTS = [
    "Just launched my new project! Check it out at https://example.com #webdev #launch",
    "What are your favorite @alice_dev tools for development? Looking for recommendations!",
    "Beautiful sunset today. Sometimes you need to step away from the screen.",
    "Hot take: TypeScript is the best thing that happened to JavaScript. Fight me. #typescript #javascript",
    "Just finished a great book on system design. Highly recommend it to all @charlie_tech!",
    "Coffee + Code = Productivity #coding #motivation",
    "Working on a new machine learning model. The results are looking promising! #AI #machinelearning",
    "Pro tip: Always write tests before you deploy. Saved me so many times! #bestpractices",
    "What is everyone working on this weekend? #weekendproject",
    "Design is not just what it looks like. Design is how it works. - Steve Jobs",
]

async def seed_profiles(db) -> list:
    """Seed profiles, skipping handles that already exist"""
    from microfeed.models.profile import Profile
    from microfeed.schemas.profile_schema import ProfileCreate
    from microfeed.services.profile_service import ProfileService

    print(f"👥 Seeding {len(SAMPLE_PROFILES)} profiles...")

    profile_service = ProfileService(db)
    profiles = []

    for data in SAMPLE_PROFILES:
        existing = await profile_service.get_profile_by_handle(data["handle"])
        if existing:
            profiles.append(existing)
            continue

        identity_id = uuid.uuid5(SEED_NAMESPACE, data["handle"])
        profile = await profile_service.create_profile(
            identity_id,
            ProfileCreate(handle=data["handle"], name=data["name"], bio=data["bio"])
        )

        if data.get("is_admin"):
            profile.is_admin = True
            await db.commit()

        profiles.append(profile)

    print(f"✅ {len(profiles)} profiles ready")
    return profiles

async def seed_posts(db, profiles: list) -> list:
    """Each profile posts a growing slice of the sample posts"""
    from microfeed.schemas.post_schema import PostCreate
    from microfeed.services.post_service import PostService

    print("📝 Seeding posts...")

    post_service = PostService(db)
    posts = []

    for index, profile in enumerate(profiles):
        for content in SAMPLE_POSTS[:3 + index]:
            post = await post_service.create_post(profile.id, PostCreate(content=content))
            posts.append(post)

    print(f"✅ Created {len(posts)} posts")
    return posts

async def seed_follows_and_likes(db, profiles: list, posts: list) -> None:
    """Random follow graph and likes; duplicates from earlier runs are skipped"""
    from microfeed.services.exceptions import ConstraintViolation
    from microfeed.services.follow_service import FollowService
    from microfeed.services.like_service import LikeService

    print("🤝 Seeding follows and likes...")

    follow_service = FollowService(db)
    like_service = LikeService(db)
    follows = likes = 0

    # Plain ids: a rolled-back duplicate expires every loaded instance
    profile_ids = [profile.id for profile in profiles]
    post_authors = [(post.id, post.user_id) for post in posts]

    for follower_id in profile_ids:
        for followee_id in profile_ids:
            if follower_id != followee_id and random.random() > 0.5:
                try:
                    await follow_service.follow(follower_id, followee_id)
                    follows += 1
                except ConstraintViolation:
                    pass

    for post_id, author_id in post_authors:
        for profile_id in profile_ids:
            if profile_id != author_id and random.random() > 0.7:
                try:
                    await like_service.like_post(profile_id, post_id)
                    likes += 1
                except ConstraintViolation:
                    pass

    print(f"✅ Created {follows} follows and {likes} likes")

async def seed() -> None:
    from microfeed.db.session import AsyncSessionLocal, close_db, init_db
    from microfeed.services.auth_service import create_access_token
    from microfeed.services.enrichment_service import drain_enrichment

    await init_db()

    try:
        async with AsyncSessionLocal() as db:
            profiles = await seed_profiles(db)
            accounts = [(profile.handle, profile.id) for profile in profiles]
            posts = await seed_posts(db, profiles)
            await seed_follows_and_likes(db, profiles, posts)

        # Hashtags, mentions and link previews are written in the background
        await drain_enrichment()
    finally:
        await close_db()

    print("\n🔑 Development tokens:")
    for handle, identity_id in accounts:
        print(f"  @{handle}: {create_access_token(identity_id)}")

if __name__ == "__main__":
    asyncio.run(seed())
