import todo_api.domain.repositories as repos
import todo_api.domain.models as domain
import todo_api.domain.services as services
import todo_api.domain.exceptions as domexc
import todo_api.application.models as mapp
from todo_api.common.config import Config

import typing as t
import uuid
import logging

logger = logging.getLogger('app')

__all__ = ['UserService']

BCRYPT_MAX_BYTES = 72


class UserService:

    def __init__(self, user_repo: repos.IUserRepository, password_hasher: services.IPasswordHasherAsync) -> None:
        self.user_repo = user_repo
        self.hasher = password_hasher

    async def _hash_password(self, password: str) -> str:
        if not password or len(password) < Config.MIN_PASSWORD_LENGTH:
            raise domexc.UserValueError(f"Minimal password length is {Config.MIN_PASSWORD_LENGTH} symbols. Your length: {len(password or '')}")
        if len(password.encode()) > BCRYPT_MAX_BYTES:
            raise domexc.UserValueError(f"Password must not exceed {BCRYPT_MAX_BYTES} bytes")
        return await self.hasher.hash(password)

    async def _get_user(self, user_id: uuid.UUID) -> domain.User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise domexc.UserDoesNotExist("User with the provided ID does not exist")
        return user

    async def _ensure_username_free(self, username: str):
        if await self.user_repo.get_by_username(username):
            raise domexc.UserAlreadyExists("Another user with this username already exists")

    @staticmethod
    def _to_result(user: domain.User) -> mapp.UserResult:
        return mapp.UserResult.model_validate(user, from_attributes=True)

    async def register(self, user_data: mapp.RegisterUserCommand) -> mapp.UserResult:
        'Used by users to signup. The password is chosen by its owner, so it counts as initialized.'
        await self._ensure_username_free(user_data.username)
        user = domain.User.create(
            username=user_data.username,
            password_hash=await self._hash_password(user_data.password),
            role=domain.UserRole.USER,
            email=user_data.email,
            first_name=user_data.first_name,
            first_name_ruby=user_data.first_name_ruby,
            last_name=user_data.last_name,
            last_name_ruby=user_data.last_name_ruby,
            password_initialized=True,
        )
        saved_user = await self.user_repo.save(user)
        logger.info(f'[USERS] Registered user id={saved_user.id}')
        return self._to_result(saved_user)

    async def admin_create(self, current_user: mapp.UserResult, user_data: mapp.AdminCreateUserCommand) -> mapp.UserResult:
        'Used by staff to create accounts with a temporary password'
        if not current_user.is_manager:
            raise domexc.ActionNotAllowedForRole("This action is allowed for managers and admins only.")
        if user_data.role != domain.UserRole.USER and not current_user.is_admin:
            raise domexc.ActionNotAllowedForRole("Only admins can create privileged accounts.")

        await self._ensure_username_free(user_data.username)
        user = domain.User.create(
            username=user_data.username,
            password_hash=await self._hash_password(user_data.password),
            role=user_data.role,
            email=user_data.email,
            first_name=user_data.first_name,
            first_name_ruby=user_data.first_name_ruby,
            last_name=user_data.last_name,
            last_name_ruby=user_data.last_name_ruby,
            password_initialized=False,
        )
        saved_user = await self.user_repo.save(user)
        logger.info(f'[USERS] User id={current_user.id} created user id={saved_user.id} with role {saved_user.role.name}')
        return self._to_result(saved_user)

    async def get_user(self, user_id: uuid.UUID) -> mapp.UserResult:
        return self._to_result(await self._get_user(user_id))

    async def list(self, current_user: mapp.UserResult, limit: int = 100, offset: int = 0, filters: repos.UserFilter | None = None, filter_mode: t.Literal["and","or"] = "and") -> list[mapp.UserResult]:
        if not current_user.is_manager:
            raise domexc.ActionNotAllowedForRole("This action is allowed for managers and admins only.")
        users = await self.user_repo.list(limit, offset, filters, filter_mode)
        return [self._to_result(user) for user in users]

    async def update_profile(self, current_user: mapp.UserResult, edited: mapp.UpdateProfileCommand) -> mapp.UserResult:
        'Used by users to edit their profile'
        user = await self._get_user(current_user.id)
        user.update_profile(
            first_name=edited.first_name,
            first_name_ruby=edited.first_name_ruby,
            last_name=edited.last_name,
            last_name_ruby=edited.last_name_ruby,
        )
        if edited.should_update_email():
            user.update_email(edited.email)
        saved_user = await self.user_repo.save(user)
        return self._to_result(saved_user)

    async def initialize_password(self, current_user: mapp.UserResult, new_password: str) -> mapp.UserResult:
        user = await self._get_user(current_user.id)
        if await self.hasher.verify(new_password, user.password_hash):
            raise domexc.UserValueError("New password must not match the temporary one. Use different password.")
        user.initialize_password(await self._hash_password(new_password))
        saved_user = await self.user_repo.save(user)
        logger.info(f'[USERS] User id={saved_user.id} initialized their password')
        return self._to_result(saved_user)

    async def change_password(self, current_user: mapp.UserResult, old_password: str, new_password: str) -> mapp.UserResult:
        user = await self._get_user(current_user.id)
        if not await self.hasher.verify(old_password, user.password_hash):
            raise domexc.UserValueError("Old password invalid")
        if old_password == new_password:
            raise domexc.UserValueError("New password must not match the old one. Use different password.")
        user.change_password(await self._hash_password(new_password))
        saved_user = await self.user_repo.save(user)
        logger.info(f'[USERS] User id={saved_user.id} changed their password')
        return self._to_result(saved_user)

    async def admin_reset_password(self, current_user: mapp.UserResult, target_user_id: uuid.UUID, new_password: str) -> mapp.UserResult:
        if not current_user.is_admin:
            raise domexc.ActionNotAllowedForRole("This action is allowed for admins only")
        target_user = await self._get_user(target_user_id)
        target_user.reset_password(await self._hash_password(new_password))
        saved_user = await self.user_repo.save(target_user)
        logger.info(f'[USERS] Admin id={current_user.id} reset password of user id={saved_user.id}')
        return self._to_result(saved_user)

    async def change_role(self, current_user: mapp.UserResult, target_user_id: uuid.UUID, role: domain.UserRole | int) -> mapp.UserResult:
        if not current_user.is_admin:
            raise domexc.ActionNotAllowedForRole("This action is allowed for admins only")
        if current_user.id == target_user_id:
            raise domexc.ActionNotAllowedForRole("Admins are not allowed to change their own role.")
        target_user = await self._get_user(target_user_id)
        target_user.change_role(role)
        saved_user = await self.user_repo.save(target_user)
        logger.info(f'[USERS] User id={saved_user.id} got role {saved_user.role.name}')
        return self._to_result(saved_user)

    async def delete(self, current_user: mapp.UserResult) -> None:
        user = await self._get_user(current_user.id)
        user.delete()
        await self.user_repo.save(user)
        logger.info(f'[USERS] User id={user.id} deleted their account')

    async def admin_delete(self, current_user: mapp.UserResult, user_id: uuid.UUID):
        if not current_user.is_admin:
            raise domexc.ActionNotAllowedForRole("This action is allowed for admins only")
        if current_user.id == user_id:
            raise domexc.ActionNotAllowedForRole("Admins can't delete their own accounts")
        target_user = await self._get_user(user_id)
        target_user.delete()
        await self.user_repo.save(target_user)
        logger.info(f'[USERS] Admin id={current_user.id} deleted user id={user_id}')
