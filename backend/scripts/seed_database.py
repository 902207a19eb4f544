# backend/scripts/seed_database.py
import asyncio
import logging
from datetime import datetime, timezone as TZ

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy import select

# Add project root to sys.path to allow importing from app
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from app.core.auth import get_password_hash
from app.config.settings import settings as app_settings
from app.db.models import (
    UserModel,
    ProfileModel,
    StatModel,
    ConnectionModel,
    CategoryModel,
    PostModel,
    PostParticipantModel,
    DocumentModel,
    DocumentSharingModel,
    EventTypeModel,
    EventModel,
)

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

COMMON_PASSWORD = "password"

CATEGORIES = [
    ("Cardiology", "primary"),
    ("Neurology", "secondary"),
    ("Infectious Disease", "green-600"),
]

EVENT_TYPES = [
    ("Webinar", "primary"),
    ("Workshop", "secondary"),
    ("Conference", "accent/80"),
]

USERS = [
    dict(username="johnwilson", name="Dr. John Wilson", title="Cardiologist",
         organization="Boston Medical Center", specialty="Cardiology",
         location="Boston, MA", initials="JW", role="Doctor"),
    dict(username="janedavis", name="Dr. Jane Davis", title="Neurologist",
         organization="Mass General Hospital", specialty="Neurology",
         location="Boston, MA", initials="JD", role="Doctor"),
    dict(username="michaelsmith", name="Dr. Michael Smith", title="Infectious Disease Specialist",
         organization="Johns Hopkins", specialty="Infectious Disease",
         location="Baltimore, MD", initials="MS", role="Patient"),
    dict(username="rebeccajones", name="Dr. Rebecca Jones", title="Pulmonologist",
         organization="Cleveland Clinic", specialty="Pulmonology",
         location="Cleveland, OH", initials="RJ", role="Student"),
    dict(username="sarahadams", name="Dr. Sarah Adams", title="Neurologist",
         organization="Mass General Hospital", specialty="Neurology",
         location="Boston, MA", initials="SA", role="Student"),
    dict(username="robertlee", name="Dr. Robert Lee", title="Pulmonologist",
         organization="Cleveland Clinic", specialty="Pulmonology",
         location="Cleveland, OH", initials="RL", role="Patient"),
    dict(username="karenpark", name="Dr. Karen Park", title="Cardiologist",
         organization="Mayo Clinic", specialty="Cardiology",
         location="Rochester, MN", initials="KP", role="Doctor"),
]

# (initiator, recipient) pairs seeded as accepted
ACCEPTED_CONNECTIONS = [
    ("johnwilson", "janedavis"),
    ("johnwilson", "michaelsmith"),
    ("janedavis", "rebeccajones"),
]

POSTS = [
    dict(
        title="New JAMA Study: Long-term Outcomes of TAVR vs. SAVR in High-Risk Patients",
        content="This groundbreaking research provides new insights into comparative outcomes "
                "for transcatheter and surgical aortic valve replacement procedures...",
        author="johnwilson", category="Cardiology",
        participants=["janedavis", "michaelsmith"],
    ),
    dict(
        title="FDA Approves Novel Treatment for Early-Stage Alzheimer's Disease",
        content="The FDA has granted approval for a new treatment targeting amyloid plaques, "
                "showing modest but meaningful cognitive benefits in early-stage patients...",
        author="janedavis", category="Neurology",
        participants=["rebeccajones", "johnwilson"],
    ),
    dict(
        title="Updated CDC Guidelines for Managing Antibiotic-Resistant Infections",
        content="New recommendations provide updated protocols for addressing the growing "
                "challenge of antimicrobial resistance in clinical settings...",
        author="michaelsmith", category="Infectious Disease",
        participants=[],
    ),
]

DOCUMENTS = [
    dict(filename="Patient Case Analysis Q2.pdf", file_type="PDF", owner="johnwilson",
         shared_with=["janedavis", "michaelsmith"]),
    dict(filename="Treatment Effectiveness Data.xlsx", file_type="Excel", owner="johnwilson",
         shared_with=[]),
]

EVENTS = [
    dict(title="Advances in Cardiac Imaging Webinar", location="Virtual Event",
         time="2:00 PM - 3:30 PM EST", event_type="Webinar",
         date=datetime(2023, 5, 15, tzinfo=TZ.utc)),
]

STATS = [
    dict(owner="johnwilson", title="New Research Articles", value=24, icon="article",
         icon_color="text-primary", change=12, timeframe="last week"),
    dict(owner="johnwilson", title="Network Connections", value=128, icon="people",
         icon_color="text-secondary", change=8, timeframe="last month"),
]


async def seed(session: AsyncSession) -> None:
    if await session.scalar(select(UserModel.id).limit(1)):
        logger.info("Database already seeded, nothing to do.")
        return

    logger.info("Seeding database...")
    categories = {name: CategoryModel(name=name, color=color) for name, color in CATEGORIES}
    event_types = {name: EventTypeModel(name=name, color=color) for name, color in EVENT_TYPES}
    session.add_all([*categories.values(), *event_types.values()])

    password_hash = get_password_hash(COMMON_PASSWORD)
    users = {u["username"]: UserModel(password_hash=password_hash, **u) for u in USERS}
    session.add_all(users.values())
    await session.flush()

    for user in users.values():
        session.add(ProfileModel(user_id=user.id))
    # the demo account gets a filled-in dashboard
    profile_owner = users["johnwilson"]
    await session.flush()
    profile = await session.scalar(
        select(ProfileModel).where(ProfileModel.user_id == profile_owner.id)
    )
    profile.profile_completion = 85
    profile.remaining_items = 3
    profile.network_growth = 12

    for initiator, recipient in ACCEPTED_CONNECTIONS:
        session.add(
            ConnectionModel(
                user_id=users[initiator].id,
                connected_user_id=users[recipient].id,
                status="accepted",
            )
        )

    for data in POSTS:
        post = PostModel(
            title=data["title"],
            content=data["content"],
            author_id=users[data["author"]].id,
            category_id=categories[data["category"]].id,
        )
        session.add(post)
        await session.flush()
        for username in data["participants"]:
            session.add(PostParticipantModel(post_id=post.id, user_id=users[username].id))

    for data in DOCUMENTS:
        document = DocumentModel(
            filename=data["filename"],
            file_type=data["file_type"],
            owner_id=users[data["owner"]].id,
        )
        session.add(document)
        await session.flush()
        for username in data["shared_with"]:
            session.add(DocumentSharingModel(document_id=document.id, user_id=users[username].id))

    for data in EVENTS:
        session.add(
            EventModel(
                title=data["title"],
                location=data["location"],
                time=data["time"],
                date=data["date"],
                event_type_id=event_types[data["event_type"]].id,
            )
        )

    for data in STATS:
        fields = {k: v for k, v in data.items() if k != "owner"}
        session.add(StatModel(user_id=users[data["owner"]].id, **fields))

    await session.commit()
    logger.info(
        f"Seeded {len(users)} users, {len(POSTS)} posts, {len(DOCUMENTS)} documents, "
        f"{len(EVENTS)} events. Password for every account: '{COMMON_PASSWORD}'"
    )


async def main():
    engine = create_async_engine(str(app_settings.database_url))
    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with async_session() as session:
            await seed(session)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
