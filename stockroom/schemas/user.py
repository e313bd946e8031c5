# stockroom/schemas/user.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

Role = Literal["user", "admin"]


class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    name: str
    role: Role
    created_at: datetime


class UserRoleUpdate(SQLModel):
    """
    Admin-only role update schema.
    """

    model_config = ConfigDict(extra="forbid")
    role: Role
