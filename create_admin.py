"""
Promote an existing user to admin

The user must have signed in once so the users row exists.

Usage:
    python create_admin.py <email-or-user-id>
"""

# Ensure this script can be run directly from the repo root
import logging
import sys
from pathlib import Path

CURRENT_DIR = Path(__file__).resolve().parent
if str(CURRENT_DIR) not in sys.path:
    sys.path.insert(0, str(CURRENT_DIR))

from sqlalchemy import func, or_

from app.database import Base, SessionLocal, engine
from app.models import ROLE_ADMIN, User

logger = logging.getLogger(__name__)


def promote_to_admin(db, identifier: str) -> User:
    """Set role=admin on the user matching the id or email"""
    identifier = identifier.strip()
    user = (
        db.query(User)
        .filter(or_(User.id == identifier, func.lower(User.email) == identifier.lower()))
        .first()
    )
    if not user:
        raise ValueError(f"No user found for {identifier}. The user must sign in once first.")
    if user.role not in (None, ROLE_ADMIN):
        raise ValueError(f"User {user.id} is registered as a {user.role} and cannot become admin")

    user.role = ROLE_ADMIN
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print(__doc__)
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        user = promote_to_admin(db, argv[1])
        logger.info(f"✅ User {user.id} ({user.email}) is now an admin")
        return 0
    except ValueError as e:
        logger.error(f"❌ {e}")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    sys.exit(main(sys.argv))
