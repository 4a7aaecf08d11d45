# backend/seed_admin.py
"""Create the first Admin account from SEED_ADMIN_* settings.

Safe to run repeatedly: an existing account with the same email is left alone.
"""
import sys

from sqlalchemy.orm import Session

from pixelforge.config import settings
from pixelforge.database import Base, SessionLocal, engine
from pixelforge.models import Role, User
from pixelforge.services.auth import hash_password
from pixelforge.utils.logging import service_logger


def seed_admin(db: Session) -> tuple[User, bool]:
    """Return the admin user and whether it was created by this call"""
    email = settings.SEED_ADMIN_EMAIL.strip().lower()
    existing = db.query(User).filter(User.email == email).first()
    if existing:
        service_logger.info("Admin user already exists", extra={"email": existing.email, "role": existing.role.value})
        return existing, False

    admin = User(
        name=settings.SEED_ADMIN_NAME,
        email=email,
        password_hash=hash_password(settings.SEED_ADMIN_PASSWORD),
        role=Role.ADMIN
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    service_logger.info("Admin created", extra={"email": admin.email, "user_id": admin.id})
    return admin, True


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        admin, created = seed_admin(db)
    except Exception as e:
        print(f"Error seeding admin: {e}")
        sys.exit(1)
    finally:
        db.close()

    if created:
        print(f"Admin created: {admin.email}")
        print("Change the password after first login!")
    else:
        print(f"Admin user already exists: {admin.email}")

if __name__ == "__main__":
    main()
