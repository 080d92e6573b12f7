#!/usr/bin/env python3
"""Seed sample articles, submitters and tags into Neo4j for development.

Usage:
    python scripts/seed_sample_data.py            # add sample data
    python scripts/seed_sample_data.py --clear    # wipe the database first
    python scripts/seed_sample_data.py --json data.json
"""

import argparse
import asyncio
import json
import logging
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
project_root = Path(__file__).parent.parent
load_dotenv(project_root / ".env")

# Add src to path for development
sys.path.insert(0, str(project_root / "src"))

from newsgraph.storage import Neo4jClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

USERS = ["alice", "bob", "carol", "dave", "erin", "frank"]
TAGS = ["go", "rust", "python", "databases", "networking", "security", "web", "release"]
TOPICS = [
    "A tour of {tag} internals",
    "What's new in {tag} this year",
    "Debugging {tag} in production",
    "Notes on {tag} performance",
    "Why we moved away from {tag}",
    "An introduction to {tag}",
]


def generate_articles(count: int, seed: int = 7) -> list[dict]:
    """Build nested article records in the shape the read queries return."""
    rng = random.Random(seed)
    now = datetime.now(timezone.utc)
    articles = []
    for i in range(count):
        tags = rng.sample(TAGS, k=rng.randint(1, 3))
        user = rng.choice(USERS)
        articles.append({
            "id": f"s{i:04d}",
            "title": rng.choice(TOPICS).format(tag=tags[0]),
            "url": f"https://example.com/articles/{i}",
            "created": (now - timedelta(hours=i * 3)).isoformat(),
            "user": {"username": user, "avatar": f"/avatars/{user}-16.png"},
            "tags": [{"name": tag} for tag in tags],
        })
    return articles


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed newsgraph sample data")
    parser.add_argument("--count", type=int, default=80, help="Number of generated articles")
    parser.add_argument("--json", type=Path, help="Load articles from a JSON file instead")
    parser.add_argument("--clear", action="store_true", help="Delete all data first")
    args = parser.parse_args()

    db = Neo4jClient()
    await db.connect()

    try:
        if args.clear:
            await db.clear_all()

        logger.info("Setting up Neo4j schema...")
        await db.setup_schema()

        if args.json:
            articles = json.loads(args.json.read_text(encoding="utf-8"))
        else:
            articles = generate_articles(args.count)

        await db.save_articles_batch(articles)
        logger.info(f"Seeded {len(articles)} articles")
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(main())
