"""用户相关服务."""

from app.services.users.user_read_service import UserReadService
from app.services.users.user_write_service import UserDeleteOutcome, UserWriteService

__all__ = ["UserDeleteOutcome", "UserReadService", "UserWriteService"]
