import pytest

from core.post_filter import FilterParseError, PostFilter, PostFilterBuilder


@pytest.fixture
def builder():
    return PostFilterBuilder()


def test_empty_query_builds_empty_filter(builder):
    criteria = builder.build({})
    assert criteria.is_empty
    assert criteria.clauses() == []


def test_recognised_keys_are_mapped(builder):
    criteria = builder.build(
        {
            "city": "Berlin",
            "type": "rent",
            "property": "house",
            "bedroom": "2",
            "minPrice": "1000",
            "maxPrice": " 2000 ",
        }
    )
    assert criteria == PostFilter(
        city="Berlin",
        post_type="rent",
        property_type="house",
        min_bedroom=2,
        min_price=1000,
        max_price=2000,
    )
    assert len(criteria.clauses()) == 6


def test_blank_and_unknown_keys_are_ignored(builder):
    criteria = builder.build({"city": "  ", "bedroom": "", "page": "2"})
    assert criteria.is_empty


def test_decimal_numbers_are_truncated(builder):
    assert builder.build({"maxPrice": "1500.9"}).max_price == 1500


@pytest.mark.parametrize("key", ["bedroom", "minPrice", "maxPrice"])
def test_non_numeric_values_are_rejected(builder, key):
    with pytest.raises(FilterParseError) as exc:
        builder.build({key: "lots"})
    assert exc.value.key == key
    assert exc.value.value == "lots"


def test_city_clause_is_case_insensitive_and_escaped():
    clause = PostFilter(city="Ber_lin").clauses()[0]
    sql = str(clause.compile(compile_kwargs={"literal_binds": True}))
    assert "lower(posts.city)" in sql
    assert "ber/_lin" in sql


def test_listing_type_keys_map_to_exact_clauses(builder):
    criteria = builder.build({"type": "buy", "property": "condo"})

    assert not criteria.is_empty
    assert criteria.post_type == "buy"
    assert criteria.property_type == "condo"
    sql = " AND ".join(
        str(clause.compile(compile_kwargs={"literal_binds": True}))
        for clause in criteria.clauses()
    )
    assert "posts.type = 'buy'" in sql
    assert "posts.property = 'condo'" in sql
