"""用户写服务测试."""

import pytest

from app.core.exceptions import ConflictError, NotFoundError
from app.repositories.users_repository import UsersRepository
from app.services.users import UserReadService, UserWriteService


@pytest.fixture
def repository():
    return UsersRepository()


@pytest.fixture
def service(repository):
    return UserWriteService(repository)


@pytest.mark.unit
def test_create_hashes_password(service) -> None:
    user = service.create({"name": "Ann", "email": "ann@example.com", "password": "s3cret"})

    assert user.name == "Ann"
    assert user.password_hash
    assert user.password_hash != "s3cret"
    assert user.check_password("s3cret") is True
    assert user.check_password("wrong") is False
    assert "password_hash" not in user.to_dict()


@pytest.mark.unit
def test_create_rejects_duplicate_email_case_insensitively(service) -> None:
    service.create({"name": "Ann", "email": "ann@example.com", "password": "pw"})

    with pytest.raises(ConflictError) as exc_info:
        service.create({"name": "Other", "email": "ANN@example.com", "password": "pw"})

    assert exc_info.value.message_key == "EMAIL_EXISTS"


@pytest.mark.unit
def test_update_keeps_own_email_and_rehashes_password(service) -> None:
    user = service.create({"name": "Ann", "email": "ann@example.com", "password": "old"})
    old_hash = user.password_hash

    updated = service.update(user.id, {"email": "ann@example.com", "password": "new"})

    assert updated.password_hash != old_hash
    assert updated.check_password("new") is True


@pytest.mark.unit
def test_update_to_taken_email_conflicts(service) -> None:
    service.create({"name": "Ann", "email": "ann@example.com", "password": "pw"})
    bob = service.create({"name": "Bob", "email": "bob@example.com", "password": "pw"})

    with pytest.raises(ConflictError):
        service.update(bob.id, {"email": "ann@example.com"})


@pytest.mark.unit
def test_unknown_id_raises_not_found(service, repository) -> None:
    with pytest.raises(NotFoundError):
        service.update("missing", {"name": "x"})
    with pytest.raises(NotFoundError):
        service.delete("missing")
    with pytest.raises(NotFoundError):
        UserReadService(repository).get_user_or_error("missing")


@pytest.mark.unit
def test_delete_removes_user(service, repository) -> None:
    user = service.create({"name": "Ann", "email": "ann@example.com", "password": "pw"})

    outcome = service.delete(user.id)

    assert outcome.user_id == user.id
    assert repository.count_users() == 0
    assert UserReadService(repository).list_users() == []


@pytest.mark.unit
def test_names_are_stored_exactly_as_validated(service) -> None:
    user = service.create({"name": "   ", "email": "blank@example.com", "password": "pw"})
    assert user.name == "   "

    updated = service.update(user.id, {"name": " Ann "})

    assert updated.name == " Ann "
