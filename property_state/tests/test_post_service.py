import uuid
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from models.models import Post, User
from schemas.schema import PostCreate
from services.post_service import PostService


def make_post(owner=None, **fields):
    now = datetime(2024, 1, 1, 12, 0, 0)
    values = {
        "id": uuid.uuid4(),
        "title": "Flat A",
        "price": 1200,
        "images": [],
        "address": "",
        "city": "Berlin",
        "bedroom": 0,
        "bathroom": 0,
        "type": "rent",
        "property": "apartment",
        "user_id": owner.id if owner else uuid.uuid4(),
        "created_at": now,
        "updated_at": now,
        **fields,
    }
    post = Post(**values)
    post.user = owner
    return post


class FakeRepo:
    def __init__(self, with_owner=None, without_owner=None, fail_creates=0):
        self.with_owner = with_owner
        self.without_owner = without_owner
        self.fail_creates = fail_creates
        self.created = []
        self.listed = []

    async def list_with_owner(self, criteria):
        self.listed.append(("with-owner", criteria))
        if isinstance(self.with_owner, Exception):
            raise self.with_owner
        return self.with_owner or []

    async def list_without_owner(self, criteria):
        self.listed.append(("without-owner", criteria))
        if isinstance(self.without_owner, Exception):
            raise self.without_owner
        return self.without_owner or []

    async def create(self, user_id, post_data, detail_data=None):
        self.created.append(post_data)
        if len(self.created) <= self.fail_creates:
            raise OperationalError("INSERT INTO posts", {}, Exception("no such column"))
        return make_post(id=uuid.uuid4(), user_id=user_id, **post_data)

    async def get_post_with_relations(self, post_id):
        return make_post(id=post_id)


@pytest.fixture
def owner():
    return User(
        id=uuid.uuid4(),
        username="alice",
        email="alice@mail.com",
        full_name="Alice",
        avatar=None,
        created_at=datetime(2023, 5, 1),
    )


def service_with(repo):
    service = PostService(db=None)
    service.repo = repo
    return service


class TestGetPosts:
    async def test_owner_join_failure_falls_back_to_plain_listing(self):
        repo = FakeRepo(with_owner=RuntimeError("join"), without_owner=[make_post()])
        result = await service_with(repo).get_posts({"city": "ber"})

        assert [name for name, _ in repo.listed] == ["with-owner", "without-owner"]
        assert repo.listed[1][1].city == "ber"
        assert len(result) == 1
        info = result[0].owner_info
        assert info.id == "unknown"
        assert info.username == "Unknown User"
        assert info.show_contact_info is False
        assert info.location == "Berlin"

    async def test_everything_failing_gives_empty_list(self):
        repo = FakeRepo(with_owner=RuntimeError("a"), without_owner=RuntimeError("b"))
        assert await service_with(repo).get_posts({}) == []

    async def test_bad_numeric_filter_skips_storage(self):
        repo = FakeRepo(with_owner=[make_post()])
        assert await service_with(repo).get_posts({"bedroom": "many"}) == []
        assert repo.listed == []

    async def test_owner_projection(self, owner):
        repo = FakeRepo(with_owner=[make_post(owner=owner, city="")])
        result = await service_with(repo).get_posts({})

        info = result[0].owner_info
        assert info.id == str(owner.id)
        assert info.full_name == "Alice"
        assert info.member_since == datetime(2023, 5, 1)
        assert info.location == "Unknown City"


class TestCreatePost:
    async def test_retries_once_without_coordinate_keys(self, owner):
        repo = FakeRepo(fail_creates=1)
        data = PostCreate(title="Flat A", price=1200, city="Berlin", latitude=1.5)

        post = await service_with(repo).create_post(data, owner)

        first, second = repo.created
        assert first["latitude"] is None and first["longitude"] is None
        assert "latitude" not in second and "longitude" not in second
        assert post.latitude is None

    async def test_second_failure_propagates(self, owner):
        repo = FakeRepo(fail_creates=2)
        data = PostCreate(title="Flat A", price=1200, city="Berlin")

        with pytest.raises(OperationalError):
            await service_with(repo).create_post(data, owner)
        assert len(repo.created) == 2


class TestListLogging:
    async def test_unfiltered_listing_is_logged_as_all(self, caplog):
        caplog.set_level("INFO", logger="services.post_service")
        repo = FakeRepo(with_owner=[make_post()])

        await service_with(repo).get_posts({})
        await service_with(repo).get_posts({"city": "ber"})

        assert "Returning 1 posts for all listings" in caplog.text
        assert "Returning 1 posts for filter" in caplog.text
