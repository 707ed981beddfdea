import pytest

from fiscaliza.errors import ConflictError, InvalidDataError, NotFoundError
from fiscaliza.schemas import UserCreate, UserRole, UserUpdate
from fiscaliza.services.user_service import hash_password, verify_password


def test_password_hashing():
    hashed = hash_password("segredo")
    assert hashed != "segredo"
    assert verify_password("segredo", hashed)
    assert not verify_password("outro", hashed)
    assert not verify_password("segredo", "")


async def test_login(user_service):
    user = await user_service.login("admin", "admin123")
    assert user.name == "Admin Geral"
    assert user.role == UserRole.ADMIN
    assert await user_service.login("admin", "errada") is None
    assert await user_service.login("ninguem", "admin123") is None


async def test_add_user(user_service):
    created = await user_service.add(UserCreate(name="Ana", username="ana", password="123"))
    assert created.role == UserRole.INSPECTOR
    assert (await user_service.login("ana", "123")).id == created.id
    assert not hasattr(created, "password_hash")


async def test_duplicate_username_is_rejected(user_service):
    with pytest.raises(ConflictError, match="Nome de usuário já existe."):
        await user_service.add(UserCreate(name="Outro", username="fiscal", password="x"))


async def test_new_user_requires_password(user_service):
    with pytest.raises(InvalidDataError, match="Senha é obrigatória"):
        await user_service.add(UserCreate(name="Ana", username="ana"))


async def test_update_keeps_password_unless_given(user_service):
    await user_service.update("2", UserUpdate(name="João S."))
    assert (await user_service.login("fiscal", "fiscal123")).name == "João S."

    await user_service.update("2", UserUpdate(password="nova"))
    assert await user_service.login("fiscal", "fiscal123") is None
    assert await user_service.login("fiscal", "nova") is not None


async def test_update_to_taken_username_is_rejected(user_service):
    with pytest.raises(ConflictError):
        await user_service.update("2", UserUpdate(username="admin"))


async def test_update_strips_username(user_service):
    await user_service.update("2", UserUpdate(username=" fiscal2 "))
    assert (await user_service.login("fiscal2", "fiscal123")).username == "fiscal2"


async def test_update_rejects_blank_username(user_service):
    with pytest.raises(InvalidDataError):
        await user_service.update("2", UserUpdate(username="   "))


async def test_delete(user_service):
    await user_service.delete("3")
    assert [u.username for u in await user_service.list()] == ["admin", "fiscal"]
    with pytest.raises(NotFoundError):
        await user_service.delete("3")
    with pytest.raises(NotFoundError):
        await user_service.get("3")
