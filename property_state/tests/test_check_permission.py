import uuid

import pytest
from fastapi import HTTPException

from core.check_permission import CheckOwnership
from models.models import Chat


@pytest.fixture
def check():
    return CheckOwnership()


async def test_owner_passes(check):
    user_id = uuid.uuid4()
    assert await check.check_owner(owner_id=user_id, user_id=user_id) is None


async def test_missing_record_is_not_found(check):
    with pytest.raises(HTTPException) as exc:
        await check.check_owner(owner_id=None, user_id=uuid.uuid4(), action="delete")
    assert exc.value.status_code == 404
    assert exc.value.detail == "Post not found"


async def test_other_owner_is_forbidden(check):
    with pytest.raises(HTTPException) as exc:
        await check.check_owner(
            owner_id=uuid.uuid4(), user_id=uuid.uuid4(), action="delete"
        )
    assert exc.value.status_code == 403
    assert exc.value.detail == "Not authorized to delete this post"


async def test_chat_participants(check):
    one, two = uuid.uuid4(), uuid.uuid4()
    chat = Chat(user_one_id=one, user_two_id=two)

    await check.check_participant(chat, two)

    with pytest.raises(HTTPException) as exc:
        await check.check_participant(chat, uuid.uuid4())
    assert exc.value.status_code == 403

    with pytest.raises(HTTPException) as exc:
        await check.check_participant(None, one)
    assert exc.value.status_code == 404
