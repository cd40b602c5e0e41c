import logging
import uuid

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)


def seed_admin(db: Session) -> User | None:
    # Only seed if configured and no admin exists
    if not settings.SEED_ADMIN_EMAIL or not settings.SEED_ADMIN_PASSWORD:
        return None
    if db.query(User).filter(User.role == UserRole.ADMIN).count() > 0:
        return None

    email = settings.SEED_ADMIN_EMAIL.strip().lower()
    if db.query(User).filter(User.email == email).first():
        logger.warning("Seed admin email already belongs to a user, skipping seed", extra={"email": email})
        return None

    admin = User(
        id=str(uuid.uuid4()),
        name=settings.SEED_ADMIN_NAME,
        email=email,
        role=UserRole.ADMIN,
        password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
        is_active=True,
    )
    db.add(admin)
    db.commit()
    logger.info("Seeded first admin", extra={"email": admin.email})
    return admin
