"""Tests for mapping raw inventory records onto products."""

from src.models.product import DeliveryContext
from src.services.catalog.normalizer import normalize_inventory, normalize_item

WITH_PINCODE = DeliveryContext(pincode="500001")


def test_normalize_full_item_with_delivery_context(make_item):
    product = normalize_item(make_item(), WITH_PINCODE)

    assert product.id == "A1"
    assert product.name == "UltraTech OPC 53 Grade Cement"
    assert product.brand == "UltraTech"
    assert product.units == "BAG"
    assert product.unit_price == 400
    assert product.base_price == 500
    assert product.total_price == 450
    assert product.delivery_charge == 50
    assert product.discount_percent == 20
    assert product.features == ("53 Grade", "IS 12269")
    assert product.image_url == "https://cdn.example.com/ultratech.png"
    assert product.in_stock is True
    assert product.is_delivery_available is True
    assert product.is_free_delivery is False
    assert product.warehouse_name == "Hyderabad"


def test_without_delivery_context_total_is_unit_price(make_item):
    product = normalize_item(make_item())

    assert product.total_price == 400
    assert product.delivery_charge == 0


def test_empty_record_gets_defaults():
    product = normalize_item({})

    assert product.id
    assert product.name == "Product"
    assert product.brand == "Unknown"
    assert product.units == "PIECE"
    assert product.image_url == ""
    assert product.in_stock is False
    assert product.unit_price == product.base_price == product.total_price == 0
    assert product.discount_percent == 0
    assert product.features == ()


def test_non_mapping_record_does_not_raise():
    product = normalize_item(None)  # type: ignore[arg-type]

    assert product.id


def test_missing_base_price_means_no_discount(make_item):
    product = normalize_item(make_item(pricing={"unitPrice": 400}))

    assert product.base_price == 0
    assert product.discount_percent == 0


def test_identifier_falls_back_to_id_then_placeholder(make_item):
    assert normalize_item(make_item(_id=None, id="B2")).id == "B2"

    first = normalize_item(make_item(_id="", id=None))
    second = normalize_item(make_item(_id="", id=None))
    assert first.id.startswith("item-ultratech-opc-53-grade-cement-")
    assert first.id == second.id


def test_brand_falls_back_to_company_name(make_item):
    product = normalize_item(make_item(vendor={"companyName": "UltraTech Cement Ltd"}))

    assert product.brand == "UltraTech Cement Ltd"


def test_image_falls_back_to_first_gallery_entry(make_item):
    product = normalize_item(
        make_item(
            primaryImage=None,
            images=[{"url": "https://cdn.example.com/a.png"}, {"url": "b.png"}],
        )
    )

    assert product.image_url == "https://cdn.example.com/a.png"


def test_features_skip_blank_values(make_item):
    product = normalize_item(make_item(grade="  ", specification=None, details="50 kg"))

    assert product.features == ("50 kg",)


def test_out_of_stock_when_stock_missing(make_item):
    product = normalize_item(make_item(warehouse={"warehouseName": "Pune"}))

    assert product.in_stock is False


def test_delivery_unavailable_reason_carried(make_item):
    product = normalize_item(
        make_item(isDeliveryAvailable=False, deliveryReason="Outside service area")
    )

    assert product.is_delivery_available is False
    assert product.delivery_unavailable_reason == "Outside service area"


def test_normalize_inventory_page(make_item):
    payload = {
        "success": True,
        "data": {
            "inventory": [make_item(), "garbage", make_item(_id="A2")],
            "pagination": {"page": 1, "total": 2},
            "pincode": "500001",
        },
    }

    snapshot = normalize_inventory(payload, WITH_PINCODE)

    assert [product.id for product in snapshot.products] == ["A1", "A2"]
    assert snapshot.pagination == {"page": 1, "total": 2}
    assert snapshot.pincode == "500001"


def test_unsuccessful_or_malformed_pages_are_empty():
    assert normalize_inventory({"success": False}).products == ()
    assert normalize_inventory({"success": True, "data": {}}).products == ()
    assert normalize_inventory({"success": True, "data": {"inventory": None}}).products == ()
    assert normalize_inventory(None).products == ()


def test_zero_server_total_keeps_unit_price_with_delivery_context(make_item):
    product = normalize_item(
        make_item(pricing={"unitPrice": 400}, totalPrice=0), WITH_PINCODE
    )

    assert product.total_price == 400
    assert product.delivery_charge == 0
