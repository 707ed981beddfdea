# User directory service
from __future__ import annotations
import logging
from typing import List, Optional
from uuid import uuid4

from passlib.context import CryptContext

from ..errors import ConflictError, InvalidDataError, NotFoundError
from ..repository import StoredUser, UserRepository
from ..schemas import UserAccount, UserCreate, UserUpdate

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def public(user: StoredUser) -> UserAccount:
    return UserAccount(id=user.id, name=user.name, username=user.username, role=user.role)


class UserService:
    """Accounts that can sign in; the role gates user management only."""

    def __init__(self, repo: UserRepository):
        self.repo = repo

    async def login(self, username: str, password: str) -> Optional[UserAccount]:
        user = await self.repo.by_username(username.strip())
        if not user or not verify_password(password, user.password_hash):
            return None
        return public(user)

    async def list(self) -> List[UserAccount]:
        return [public(u) for u in await self.repo.all()]

    async def get(self, ident: str) -> UserAccount:
        user = await self.repo.get(ident)
        if user is None:
            raise NotFoundError("user", ident)
        return public(user)

    async def add(self, data: UserCreate) -> UserAccount:
        username = data.username.strip()
        if await self.repo.by_username(username):
            raise ConflictError("Nome de usuário já existe.")
        if not data.password:
            raise InvalidDataError("Senha é obrigatória para novos usuários.")
        user = StoredUser(
            id=str(uuid4()),
            name=data.name.strip(),
            username=username,
            role=data.role,
            password_hash=hash_password(data.password),
        )
        await self.repo.save(user)
        logger.info("User %s created with role %s", user.username, user.role.value)
        return public(user)

    async def update(self, ident: str, data: UserUpdate) -> UserAccount:
        user = await self.repo.get(ident)
        if user is None:
            raise NotFoundError("user", ident)
        changes = data.model_dump(exclude_unset=True, exclude={"password"})
        for field in ("username", "name"):
            if changes.get(field):
                changes[field] = changes[field].strip()
                if not changes[field]:
                    raise InvalidDataError(f"{field} cannot be blank")
        if changes.get("username") and changes["username"] != user.username:
            if await self.repo.by_username(changes["username"]):
                raise ConflictError("Nome de usuário já existe.")
        user = user.model_copy(update={k: v for k, v in changes.items() if v is not None})
        if data.password:
            user.password_hash = hash_password(data.password)
        await self.repo.save(user)
        return public(user)

    async def delete(self, ident: str) -> None:
        if not await self.repo.delete(ident):
            raise NotFoundError("user", ident)
        logger.info("User %s deleted", ident)
