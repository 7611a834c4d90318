#!/usr/bin/env python3
"""Seed script to create the platform admin user"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.models.user import User, UserRole
from app.core.security import get_password_hash
from app.core.config import settings


def seed_admin():
    db: Session = SessionLocal()
    try:
        admin = db.query(User).filter(User.email == settings.SUDO_ADMIN_EMAIL).first()
        if admin:
            print(f"Admin user {settings.SUDO_ADMIN_EMAIL} already exists")
            return admin.id

        # Platform admins are not tied to an organization
        admin = User(
            email=settings.SUDO_ADMIN_EMAIL,
            hashed_password=get_password_hash(settings.SUDO_ADMIN_PASSWORD),
            org_id=None,
            role=UserRole.PROJECTRA_ADMIN,
        )
        db.add(admin)
        db.commit()
        print(f"Admin user created: {settings.SUDO_ADMIN_EMAIL}")
        print("Password: (use SUDO_ADMIN_PASSWORD from env)")
        return admin.id
    except Exception as e:
        db.rollback()
        print(f"Error creating admin user: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_admin()
