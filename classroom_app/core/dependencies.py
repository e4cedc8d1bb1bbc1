# classroom_app/core/dependencies.py
"""Caller identity and role checks.

Authentication happens upstream; the gateway forwards the authenticated
caller as ``X-School-Id``, ``X-Profile-Id`` and ``X-Role`` headers.
"""
from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from fastapi import Depends, Header

from .exceptions import PermissionDeniedError


class Role(str, Enum):
    PRINCIPAL = "principal"
    TEACHER = "teacher"
    STUDENT = "student"


@dataclass(frozen=True)
class CallerContext:
    school_id: UUID
    profile_id: UUID
    role: Role


async def get_caller_context(
    x_school_id: UUID = Header(...),
    x_profile_id: UUID = Header(...),
    x_role: Role = Header(...),
) -> CallerContext:
    return CallerContext(school_id=x_school_id, profile_id=x_profile_id, role=x_role)


def require_role(*roles: Role):
    """Dependency factory rejecting callers whose role is not in ``roles``"""
    async def checker(caller: CallerContext = Depends(get_caller_context)) -> CallerContext:
        if caller.role not in roles:
            raise PermissionDeniedError("You are not allowed to perform this action")
        return caller
    return checker
