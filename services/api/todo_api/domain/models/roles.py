from enum import IntEnum
import todo_api.domain.exceptions as domexc

__all__ = ['UserRole']


class UserRole(IntEnum):
    """Closed set of roles. Integer codes are what gets persisted and put into tokens."""
    ADMIN = 0
    MANAGER = 1
    USER = 2

    @property
    def code(self) -> int:
        return int(self.value)

    def has_admin_privilege(self) -> bool:
        return self is UserRole.ADMIN

    def has_manager_privilege(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.MANAGER)

    @classmethod
    def from_code(cls, code: int) -> "UserRole":
        if isinstance(code, bool) or not isinstance(code, int):
            raise domexc.RoleValueError(f"Role code must be an integer, got '{code!r}'")
        try:
            return cls(code)
        except ValueError:
            raise domexc.RoleValueError(f"Unknown role code: {code}") from None
