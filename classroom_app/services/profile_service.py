# classroom_app/services/profile_service.py
"""Creates a login identity together with its teacher or student profile."""
from typing import Any, Dict, Tuple
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .base_service import BaseService
from .notification_service import Credentials
from ..core.dependencies import Role
from ..core.exceptions import ConflictError
from ..core.security import generate_password, get_password_hash
from ..models import ProfileStatus, Student, Teacher, User

logger = logging.getLogger(__name__)

_PROFILE_MODELS = {
    Role.TEACHER: Teacher,
    Role.STUDENT: Student,
}


class ProfileService(BaseService[User]):
    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str):
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create_user_and_profile(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        school_id,
        profile_fields: Dict[str, Any] = None,
    ) -> Tuple[Any, Credentials]:
        """
        Create a ``User`` with a generated password and the matching profile row.

        Must run inside the caller's transaction. Returns the profile and the
        plain-text credentials to be e-mailed once the transaction commits.
        """
        if await self.get_by_email(email):
            raise ConflictError(f"User with email {email} already exists")

        password = generate_password()
        user = await self.create({
            "email": email,
            "hashed_password": get_password_hash(password),
            "role": role.value,
        })

        profile_model = _PROFILE_MODELS[role]
        profile = profile_model(
            name=name,
            school_id=school_id,
            user_id=user.id,
            status=ProfileStatus.ACTIVE.value,
            **(profile_fields or {}),
        )
        self.db.add(profile)
        await self.db.flush()

        logger.info(f"Created {role.value} profile {profile.id} for {user.email}")
        return profile, Credentials(name=name, email=user.email, password=password, role=role.value)
