import datetime as dt
from uuid import uuid4

import pytest
from pydantic import ValidationError

from usercrud.crud.mapping import (
    create_dto_to_entity,
    entity_to_patch_projection,
    entity_to_user_dto,
    full_name_of,
    merge_update_dto,
    update_dto_to_entity,
)
from usercrud.crud.schemas import (
    LOGIN_ERROR_MESSAGE,
    CreateUserDto,
    UpdateUserDto,
    field_errors,
)
from usercrud.types import UserEntity

CREATED = dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc)


@pytest.fixture
def user() -> UserEntity:
    return UserEntity(
        id=uuid4(),
        login="abc123",
        first_name="Anna",
        last_name="Ivanova",
        created_at=CREATED,
    )


@pytest.mark.parametrize(
    "first, last, expected",
    [("Anna", "Ivanova", "Ivanova Anna"), (None, "Doe", "Doe"), ("Anna", None, "Anna"), (None, None, "")],
)
def test_full_name(first, last, expected):
    assert full_name_of(UserEntity(login="x", first_name=first, last_name=last)) == expected


def test_create_dto_to_entity_has_no_identity():
    entity = create_dto_to_entity(CreateUserDto(login="abc"))
    assert entity.id is None
    assert entity.created_at is None
    assert (entity.first_name, entity.last_name) == ("John", "Doe")


def test_update_dto_to_entity_uses_given_id():
    user_id = uuid4()
    dto = UpdateUserDto.model_validate(
        {"login": "abc", "firstName": "Anna", "lastName": "Ivanova"}
    )
    entity = update_dto_to_entity(user_id, dto)
    assert entity.id == user_id
    assert entity.login == "abc"


def test_entity_to_user_dto(user: UserEntity):
    dto = entity_to_user_dto(user)
    assert dto.id == user.id
    assert dto.full_name == "Ivanova Anna"
    assert dto.created_at == CREATED


def test_patch_projection_round_trips_through_update_dto(user: UserEntity):
    projection = entity_to_patch_projection(user)
    assert projection == {"login": "abc123", "firstName": "Anna", "lastName": "Ivanova"}
    dto = UpdateUserDto.model_validate(projection)
    assert merge_update_dto(user, dto) == user


def test_merge_keeps_identity_and_created_at(user: UserEntity):
    dto = UpdateUserDto(login="xyz", first_name="B", last_name="C")
    merged = merge_update_dto(user, dto)
    assert merged.id == user.id
    assert merged.created_at == CREATED
    assert (merged.login, merged.first_name, merged.last_name) == ("xyz", "B", "C")
    assert user.login == "abc123"


class TestValidation:
    @pytest.mark.parametrize("login", ["abc", "ABC123", "Юзер1"])
    def test_alphanumeric_login_is_accepted(self, login):
        assert CreateUserDto(login=login).login == login

    @pytest.mark.parametrize("login", ["a b", "abc!", "a-b", "a_b", "ab½", "x²", "Ⅻ"])
    def test_login_error_message(self, login):
        with pytest.raises(ValidationError) as exc_info:
            CreateUserDto.model_validate({"login": login})
        assert field_errors(exc_info.value) == {"Login": [LOGIN_ERROR_MESSAGE]}

    def test_update_errors_are_keyed_by_field(self):
        with pytest.raises(ValidationError) as exc_info:
            UpdateUserDto.model_validate({"login": "abc", "firstName": ""})
        errors = field_errors(exc_info.value)
        assert set(errors) == {"FirstName", "LastName"}
