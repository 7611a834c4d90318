from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid, Enum as SQLEnum
import uuid
from datetime import datetime
import enum
from app.db.session import Base


class UserRole(str, enum.Enum):
    PROJECTRA_ADMIN = "projectra_admin"
    ADMIN = "admin"
    PROJECT_MANAGER = "project_manager"
    TEAM_LEADER = "team_leader"
    MEMBER = "member"
    CLIENT = "client"
    GUEST = "guest"


# Roles allowed to manage the system feature catalog
FEATURE_ADMIN_ROLES = (UserRole.PROJECTRA_ADMIN, UserRole.ADMIN)


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, ForeignKey("organizations.id"), nullable=True, index=True)  # null for platform admins
    email = Column(String, nullable=False, unique=True, index=True)
    hashed_password = Column(String, nullable=False)
    role = Column(
        SQLEnum(UserRole, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=UserRole.MEMBER,
        nullable=False,
    )
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
