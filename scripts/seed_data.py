"""Seed a demo artist, executive and track for local negotiation runs."""

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from timeless.core.config import get_config
from timeless.core.security import hash_password
from timeless.database.db import create_tables, get_db_session
from timeless.models import Track, User, UserRole

DEMO_PASSWORD = "password123"
DEMO_USERS = (
    ("artist@timeless.dev", "Demo Artist", UserRole.ARTIST),
    ("exec@timeless.dev", "Demo Executive", UserRole.EXEC),
    ("admin@timeless.dev", "Demo Admin", UserRole.ADMIN),
)


def seed() -> None:
    config = get_config()
    create_tables()
    with get_db_session() as db:
        try:
            users = {}
            for email, full_name, role in DEMO_USERS:
                user = db.query(User).filter(User.email == email).first()
                if user is None:
                    user = User(
                        email=email,
                        full_name=full_name,
                        role=role,
                        hashed_password=hash_password(DEMO_PASSWORD, iterations=config.PASSWORD_HASH_ITERATIONS),
                    )
                    db.add(user)
                    db.flush()
                    print(f"Seeded user: {email} ({role.value})")
                users[role] = user

            artist = users[UserRole.ARTIST]
            track = db.query(Track).filter(Track.artist_id == artist.id).first()
            if track is None:
                track = Track(title="Midnight Drive", artist_id=artist.id)
                db.add(track)
                db.flush()
                print(f"Seeded track: {track.title} ({track.id})")
            db.commit()
        except Exception as e:
            print(f"Error seeding data: {e}")
            db.rollback()
            raise


if __name__ == "__main__":
    seed()
