"""
Users service - in-memory backend for the User resource
"""

import asyncio
import logging
import uuid
from typing import Dict, Any, Optional
from uuid import UUID

from config.settings import USERS_PERMISSIVE_UPDATE, USERS_PERMISSIVE_DELETE
from services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)

class UsersService(BaseService):
    """Service for user CRUD operations.

    Records are kept in insertion order in wire form (camelCase keys).
    ``permissive_update`` and ``permissive_delete`` decide what happens when
    a PUT or DELETE names an identifier that was never created.
    """

    def __init__(
        self,
        permissive_update: bool = USERS_PERMISSIVE_UPDATE,
        permissive_delete: bool = USERS_PERMISSIVE_DELETE
    ):
        super().__init__("users")
        self.permissive_update = permissive_update
        self.permissive_delete = permissive_delete
        self._users: Dict[UUID, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _record(user_id: UUID, data: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "userId": user_id,
            "username": data["username"],
            "firstName": data["firstName"],
            "lastName": data["lastName"]
        }

    async def create_user(self, data: Dict[str, Any]) -> ServiceResult:
        """
        Create a user

        Args:
            data: Wire-form user; ``userId`` may be absent or None

        Returns:
            ServiceResult with the stored user, or CONFLICT_ERROR when the
            supplied identifier is already taken
        """
        user_id = data.get("userId") or uuid.uuid4()

        async with self._lock:
            if user_id in self._users:
                logger.warning(f"Rejected duplicate user {user_id}")
                return self.conflict(user_id)

            record = self._record(user_id, data)
            self._users[user_id] = record

        logger.info(f"Created user {user_id} ({record['username']})")
        return ServiceResult.ok([dict(record)])

    async def get_user(self, user_id: UUID) -> ServiceResult:
        record = self._users.get(user_id)
        if record is None:
            return self.not_found(user_id)
        return ServiceResult.ok([dict(record)])

    async def list_users(self, page: int = 0, size: int = 20) -> ServiceResult:
        """List users in insertion order, sliced by page and size"""
        records = list(self._users.values())
        start = page * size
        data = [dict(record) for record in records[start:start + size]]

        page_info = {
            "page": page,
            "size": size,
            "total": len(records)
        }
        return ServiceResult.ok(data, page_info=page_info)

    async def update_user(self, user_id: UUID, data: Dict[str, Any]) -> ServiceResult:
        """
        Replace a user's fields. The path identifier wins over any userId
        carried in the body.
        """
        async with self._lock:
            if user_id not in self._users:
                if not self.permissive_update:
                    return self.not_found(user_id)
                logger.info(f"Update of unknown user {user_id}; storing as new record")

            record = self._record(user_id, data)
            self._users[user_id] = record

        logger.info(f"Updated user {user_id}")
        return ServiceResult.ok([dict(record)])

    async def delete_user(self, user_id: UUID) -> ServiceResult:
        """Delete a user and return its last representation"""
        async with self._lock:
            record = self._users.pop(user_id, None)

        if record is None:
            if not self.permissive_delete:
                return self.not_found(user_id)
            logger.info(f"Delete of unknown user {user_id}; answering with placeholder")
            record = {
                "userId": user_id,
                "username": None,
                "firstName": None,
                "lastName": None
            }
        else:
            logger.info(f"Deleted user {user_id}")

        return ServiceResult.ok([record])

    async def clear(self):
        async with self._lock:
            self._users.clear()

# Global service instance
_users_service: Optional[UsersService] = None

def get_users_service() -> UsersService:
    """Get the global users service instance"""
    global _users_service
    if _users_service is None:
        _users_service = UsersService()
    return _users_service
