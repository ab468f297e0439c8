# tests/test_repositories.py
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from models.order import Order, OrderProduct, OrderStatus
from repositories.base import Visibility


def _order(order_repo, number, product=None, order_date=None, **kwargs):
    order = Order(number=number, description=f"Order {number} for tests", **kwargs)
    if order_date is not None:
        order.order_date = order_date
    if product is not None:
        order.items.append(OrderProduct(product_id=product.id, quantity=1, unit_price=product.price))
    return order_repo.add(order)


def test_soft_delete_hides_row_from_active_queries(product_repo, make_product):
    product = make_product()
    assert product_repo.delete(product.id)

    assert product_repo.get_by_id(product.id, scope=Visibility.ACTIVE) is None
    stored = product_repo.get_by_id(product.id, scope=Visibility.ALL)
    assert stored is not None and stored.is_deleted
    assert not product_repo.exists(product.id)
    assert product_repo.get_active() == []
    assert len(product_repo.get_all()) == 1


def test_soft_delete_twice_returns_false(product_repo, make_product):
    product = make_product()
    assert product_repo.delete(product.id)
    assert not product_repo.delete(product.id)


def test_update_sets_updated_at(product_repo, make_product):
    product = make_product()
    assert product.updated_at is None
    product.name = "Renamed"
    assert product_repo.update(product).updated_at is not None


def test_delete_permanently(product_repo, make_product):
    product = make_product()
    assert product_repo.delete_permanently(product.id)
    assert product_repo.get_by_id(product.id, scope=Visibility.ALL) is None


def test_sku_lookup_is_case_insensitive(product_repo, make_product):
    product = make_product(sku="ABC-123")
    assert product_repo.get_by_sku("abc-123").id == product.id
    assert not product_repo.is_sku_unique("Abc-123")
    assert product_repo.is_sku_unique("abc-123", exclude_id=product.id)


def test_sku_of_deleted_product_can_be_reused(product_repo, make_product):
    product = make_product(sku="ABC-123")
    product_repo.delete(product.id)
    assert product_repo.is_sku_unique("ABC-123")
    assert product_repo.get_by_sku("ABC-123") is None


def test_catalog_filters(product_repo, make_product):
    make_product(sku="HAM-1", name="Hammer", category="Hand Tools", price="40.00", stock=100)
    make_product(sku="SAW-1", name="Saw", category="Power Tools", price="250.00", stock=3)
    make_product(sku="GLV-1", name="Gloves", category="hand tools", price="12.00", stock=0)
    make_product(sku="OLD-1", name="Old lamp", category="Electrical", price="9.00", stock=5, is_active=False)

    assert [p.sku for p in product_repo.get_by_category("HAND TOOLS")] == ["GLV-1", "HAM-1"]
    assert [p.sku for p in product_repo.get_available()] == ["HAM-1", "SAW-1"]
    assert [p.sku for p in product_repo.get_by_price_range(Decimal("10"), Decimal("250"))] == ["GLV-1", "HAM-1", "SAW-1"]
    assert [p.sku for p in product_repo.get_low_stock(5)] == ["GLV-1", "SAW-1"]


def test_order_lookup_by_number_and_status(order_repo, make_product):
    product = make_product()
    order = _order(order_repo, "ORD-001", product)
    _order(order_repo, "ORD-002", status=OrderStatus.APPROVED)

    found = order_repo.get_by_number("ORD-001")
    assert found.id == order.id
    assert found.items[0].product.sku == "ABC-123"
    assert order_repo.number_exists("ORD-002")
    assert not order_repo.number_exists("ORD-404")
    assert [o.number for o in order_repo.get_by_status(OrderStatus.APPROVED)] == ["ORD-002"]


def test_orders_listed_newest_first(order_repo):
    now = datetime.now(timezone.utc)
    _order(order_repo, "ORD-OLD", order_date=now - timedelta(days=2))
    _order(order_repo, "ORD-NEW", order_date=now)
    assert [o.number for o in order_repo.list(scope=Visibility.ACTIVE)] == ["ORD-NEW", "ORD-OLD"]


def test_date_range_includes_both_days(order_repo):
    _order(order_repo, "ORD-A", order_date=datetime(2025, 3, 1, 0, 0, tzinfo=timezone.utc))
    _order(order_repo, "ORD-B", order_date=datetime(2025, 3, 3, 23, 59, tzinfo=timezone.utc))
    _order(order_repo, "ORD-C", order_date=datetime(2025, 3, 4, 0, 0, 1, tzinfo=timezone.utc))

    numbers = {o.number for o in order_repo.get_by_date_range(date(2025, 3, 1), date(2025, 3, 3))}
    assert numbers == {"ORD-A", "ORD-B"}


def test_orders_by_product(order_repo, make_product):
    drill = make_product(sku="DRL-1")
    saw = make_product(sku="SAW-1")
    _order(order_repo, "ORD-1", drill)
    _order(order_repo, "ORD-2", saw)

    assert [o.number for o in order_repo.get_by_product_id(drill.id)] == ["ORD-1"]


def test_deleted_orders_are_only_listed_with_all_scope(order_repo):
    order = _order(order_repo, "ORD-1")
    order_repo.delete(order.id)

    assert order_repo.list(scope=Visibility.ACTIVE) == []
    assert [o.number for o in order_repo.list(scope=Visibility.ALL)] == ["ORD-1"]
    assert order_repo.get_with_products(order.id) is None
