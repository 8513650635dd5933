import pytest

from sqlalchemy import event

from models.category import Category
from models.product import Product
from services.products import (
    ALLOWED_FIELDS,
    build_filters,
    list_products,
    parse_fields,
    parse_includes,
    parse_pagination,
    parse_sort,
)
from utils.exceptions import ValidationError


def test_parse_fields_defaults_to_all():
    assert parse_fields(None) == list(ALLOWED_FIELDS)
    assert parse_fields(" , ") == list(ALLOWED_FIELDS)


def test_parse_fields_trims_and_dedupes():
    assert parse_fields(" name, price,,name ") == ["name", "price"]


def test_parse_fields_rejects_unknown():
    with pytest.raises(ValidationError, match="bogus_field"):
        parse_fields("name,bogus_field")


def test_parse_sort():
    col, desc = parse_sort(None)
    assert col is Product.created_at and desc
    col, desc = parse_sort("price")
    assert col is Product.price and not desc
    col, desc = parse_sort("-name")
    assert col is Product.name and desc


def test_parse_sort_rejects_non_sortable_field():
    # stock is selectable but not sortable
    with pytest.raises(ValidationError, match='"stock"'):
        parse_sort("-stock")


def test_build_filters():
    assert build_filters({}) == []
    assert build_filters({"category": "", "minPrice": None}) == []
    assert len(build_filters({"category": "2", "minPrice": "10", "maxPrice": "99.5"})) == 3


@pytest.mark.parametrize("name", ["category", "minPrice", "maxPrice"])
def test_build_filters_rejects_non_numbers(name):
    with pytest.raises(ValidationError, match=name):
        build_filters({name: "abc"})


def test_build_filters_rejects_nan():
    with pytest.raises(ValidationError, match="minPrice"):
        build_filters({"minPrice": "nan"})


@pytest.mark.parametrize(
    "page,limit,expected",
    [
        (None, None, (1, 10)),
        ("2", "5", (2, 5)),
        ("0", "500", (1, 100)),
        ("-3", "abc", (1, 10)),
        ("x", "0", (1, 10)),
        ("1", "-4", (1, 1)),
        ("2.0", "1e2", (2, 100)),
        ("2.9", "nan", (2, 10)),
    ],
)
def test_parse_pagination(page, limit, expected):
    assert parse_pagination(page, limit) == expected


def test_parse_includes_ignores_unknown():
    assert parse_includes("category, reviews") == {"category"}
    assert parse_includes(None) == set()


def test_list_sorted_by_price_desc(storage):
    result = list_products(storage.get_session(), page="1", limit="10", sort="-price")

    prices = [row["price"] for row in result["data"]]
    assert len(prices) == 10
    assert prices == sorted(prices, reverse=True)
    assert prices[0] == 499.99
    assert result["pagination"] == {"page": 1, "limit": 10, "totalItems": 20, "totalPages": 2}


def test_second_page_continues_first(storage):
    session = storage.get_session()
    first = list_products(session, page=1, limit=10, sort="name", fields="id")
    second = list_products(session, page=2, limit=10, sort="name", fields="id")

    ids = [r["id"] for r in first["data"]] + [r["id"] for r in second["data"]]
    assert len(set(ids)) == 20


def test_projection_hides_id_unless_requested(storage):
    session = storage.get_session()
    rows = list_products(session, fields="name,price")["data"]
    assert all(set(row) == {"name", "price"} for row in rows)

    rows = list_products(session, fields="id,name")["data"]
    assert all(set(row) == {"id", "name"} for row in rows)


def test_default_projection_and_order(storage):
    rows = list_products(storage.get_session())["data"]
    assert set(rows[0]) == {"id", "name", "price", "stock", "createdAt", "categoryId"}
    assert rows[0]["createdAt"].endswith("Z")
    created = [row["createdAt"] for row in rows]
    assert created == sorted(created, reverse=True)


def test_filters_are_combined(storage):
    session = storage.get_session()
    books = session.query(Category).filter_by(name="Books").one()

    result = list_products(
        session,
        limit=100,
        filters={"category": str(books.id), "minPrice": "18.5", "maxPrice": "25"},
    )
    names = sorted(row["name"] for row in result["data"])
    assert names == ["Cookbook", "Graphic Novel", "Mystery Thriller", "Productivity Guide"]
    assert result["pagination"]["totalItems"] == 4
    assert result["pagination"]["totalPages"] == 1


def test_empty_result_has_zero_pages(storage):
    result = list_products(storage.get_session(), filters={"minPrice": "100000"})
    assert result["data"] == []
    assert result["pagination"]["totalItems"] == 0
    assert result["pagination"]["totalPages"] == 0


def test_include_category(storage):
    session = storage.get_session()
    categories = {c.id: c for c in session.query(Category).all()}

    rows = list_products(session, limit=100, fields="categoryId", include_category=True)["data"]
    assert len(rows) == 20
    for row in rows:
        category = categories[row["categoryId"]]
        assert row["category"] == {
            "id": category.id,
            "name": category.name,
            "description": category.description,
        }


def test_include_category_with_dangling_reference(storage):
    with storage.transaction() as session:
        session.add(Product(name="Orphan", price=1.0, stock=1, category_id=999))

    rows = list_products(
        storage.get_session(), fields="name", include_category=True, sort="price", limit=1
    )["data"]
    assert rows == [{"name": "Orphan", "category": {"id": None, "name": None, "description": None}}]


def test_user_input_never_reaches_sql(storage):
    with pytest.raises(ValidationError):
        list_products(storage.get_session(), sort="price; DROP TABLE products")
    with pytest.raises(ValidationError):
        list_products(storage.get_session(), fields="name FROM users --")
    assert list_products(storage.get_session())["pagination"]["totalItems"] == 20


def test_identity_column_is_always_selected(storage):
    session = storage.get_session()
    engine = session.get_bind()
    statements = []

    def capture(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", capture)
    try:
        rows = list_products(session, fields="name", limit=3)["data"]
    finally:
        event.remove(engine, "before_cursor_execute", capture)

    listing = next(s for s in statements if "ORDER BY" in s)
    assert "products.id AS _id" in listing
    assert all(set(row) == {"name"} for row in rows)
