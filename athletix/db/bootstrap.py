from loguru import logger
from sqlalchemy import func, select

from athletix.db.models import Base, Sport
from athletix.db.session import get_engine, get_session

DEFAULT_SPORTS = (
    "Athletics",
    "Badminton",
    "Baseball",
    "Basketball",
    "Boxing",
    "Football",
    "Swimming",
    "Table Tennis",
    "Taekwondo",
    "Tennis",
    "Volleyball",
)


def init_db() -> None:
    """Create tables if missing and seed the sports catalogue when empty."""
    logger.info("Ensuring database tables exist")
    Base.metadata.create_all(bind=get_engine())

    with get_session() as session:
        count = session.execute(select(func.count()).select_from(Sport)).scalar_one()
        if count == 0:
            session.add_all([Sport(name=name) for name in DEFAULT_SPORTS])
            logger.info(f"Seeded {len(DEFAULT_SPORTS)} sports")
    logger.info("Database tables verified")
