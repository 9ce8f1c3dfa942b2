import structlog

from ..infrastructure.repositories import Repositories

logger = structlog.get_logger()

DEMO_EVENTS = [
    {"title": "Tech Innovators Summit", "date": "2025-12-01", "venue": "Auditorium A"},
    {"title": "AI Workshop", "date": "2025-12-05", "venue": "Lab 3"},
    {"title": "Cultural Fest", "date": "2025-12-10", "venue": "Main Ground"},
]


async def seed_demo_events(repos: Repositories) -> int:
    """Заполнить events демо-данными, если коллекция пуста."""
    existing = await repos.events.list()
    if existing:
        logger.info("Skipping seed, events already exist", count=len(existing))
        return 0
    for item in DEMO_EVENTS:
        await repos.events.create(**item)
    logger.info("Seeded demo events", count=len(DEMO_EVENTS))
    return len(DEMO_EVENTS)
