#!/usr/bin/env python3
"""
Seed the default system feature catalog.

Features that already exist are left untouched, so the script is safe to
re-run. Requires the platform admin (scripts/seed_admin.py) to exist; it is
recorded as the creator.
"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session
from app.db.session import SessionLocal
from app.models.user import User
from app.core.config import settings
from app.core.errors import RegistryError
from app.services import feature_registry

# Order matters: dependencies must be seeded before their dependents
DEFAULT_FEATURES = [
    {
        "name": "kanban",
        "display_name": "Kanban Boards",
        "description": "Drag-and-drop task boards for projects and sprints",
        "category": "core",
    },
    {
        "name": "time_tracking",
        "display_name": "Time Tracking",
        "description": "Log hours against tasks and review timesheets",
        "category": "core",
    },
    {
        "name": "file_sharing",
        "display_name": "File Sharing",
        "description": "Upload and share files within projects",
        "category": "collaboration",
    },
    {
        "name": "chat",
        "display_name": "Team Chat",
        "description": "Project channels and direct messages",
        "category": "collaboration",
    },
    {
        "name": "analytics",
        "display_name": "Analytics",
        "description": "Project health dashboards, burndown and velocity charts",
        "category": "analytics",
        "permissions": {"roles": ["admin", "project_manager", "team_leader"]},
    },
    {
        "name": "reporting",
        "display_name": "Reports",
        "description": "Exportable project and budget reports",
        "category": "analytics",
        "is_premium": True,
        "pricing": {"monthly": 5, "yearly": 50},
        "permissions": {"roles": ["admin", "project_manager"]},
        "dependencies": ["analytics"],
    },
    {
        "name": "ai_assistant",
        "display_name": "AI Assistant",
        "description": "Task suggestions and project summaries",
        "category": "ai",
        "is_premium": True,
        "pricing": {"monthly": 10, "yearly": 100},
        "dependencies": ["chat"],
    },
    {
        "name": "slack_integration",
        "display_name": "Slack Integration",
        "description": "Mirror project notifications into Slack channels",
        "category": "integration",
        "is_enabled": False,
        "configuration": {"webhook_url": None, "notify_on": ["task_assigned", "sprint_completed"]},
        "dependencies": ["chat"],
    },
]


def seed_features():
    db: Session = SessionLocal()
    try:
        admin = db.query(User).filter(User.email == settings.SUDO_ADMIN_EMAIL).first()
        if not admin:
            print(f"Admin user {settings.SUDO_ADMIN_EMAIL} not found. Run scripts/seed_admin.py first.")
            return 1

        created = 0
        for record in DEFAULT_FEATURES:
            existing = feature_registry.find_many(db, [record["name"]])
            if existing:
                print(f"  - {record['name']}: already exists, skipping")
                continue
            try:
                feature_registry.create(db, record, created_by=admin.id)
            except RegistryError as e:
                print(f"  ! {record['name']}: {e.detail}")
                continue
            created += 1
            print(f"  + {record['name']}")

        print(f"Seeded {created} feature(s)")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(seed_features())
