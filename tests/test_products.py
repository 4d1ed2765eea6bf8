"""
Test suite for products module

Tests the Product Engine: creation and validation, versioned updates and
deletes, history, listing and search.
"""

import pytest
from datetime import datetime, timezone, date, timedelta

from product_catalog.audit import AuditContext
from product_catalog.errors import NotFoundError, ValidationError
from product_catalog.products import (
    ProductEngine, Product, ProductType, ProductStatus, ProductCurrency, InterestType
)
from product_catalog.storage import InMemoryStorage
from product_catalog.versioning import CrudMarker


class SteppingClock:
    """Clock advancing one second on every reading"""

    def __init__(self):
        self.current = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def storage():
    """In-memory storage for tests"""
    return InMemoryStorage()


@pytest.fixture
def product_engine(storage):
    """Product engine instance for tests"""
    return ProductEngine(storage, clock=SteppingClock())


def product_data(code="PROD001", name="Test Product", **overrides):
    data = {
        "product_code": code,
        "product_name": name,
        "product_type": "SAVINGS",
        "currency": "USD",
        "effective_date": "2024-01-01",
    }
    data.update(overrides)
    return data


class TestProductCreation:
    """Test product creation and validation"""

    def test_create_product(self, product_engine):
        """Test creating a product with defaults"""
        product = product_engine.create_product(product_data(description="Basic savings"))

        assert isinstance(product, Product)
        assert product.product_code == "PROD001"
        assert product.product_type == ProductType.SAVINGS
        assert product.currency == ProductCurrency.USD
        assert product.effective_date == date(2024, 1, 1)
        assert product.status == ProductStatus.DRAFT
        assert product.description == "Basic savings"
        assert product.crud_marker == CrudMarker.CREATE

    def test_create_stamps_caller_identity(self, product_engine):
        """Test the audit identity is stamped on the created version"""
        context = AuditContext(user_id="alice", workstation_id="WS042", program_id="PGM007")
        product = product_engine.create_product(product_data(), context)

        assert product.user_id == "alice"
        assert product.workstation_id == "WS042"
        assert product.program_id == "PGM007"
        assert product.reference_id

    def test_enum_values_case_insensitive(self, product_engine):
        """Test enum fields accept member names in any case"""
        product = product_engine.create_product(
            product_data(product_type="fixed_deposit", interest_type="compound")
        )
        assert product.product_type == ProductType.FIXED_DEPOSIT
        assert product.interest_type == InterestType.COMPOUND

    @pytest.mark.parametrize("missing", ["product_code", "product_name", "product_type",
                                         "currency", "effective_date"])
    def test_required_fields(self, product_engine, missing):
        """Test each required field is enforced"""
        data = product_data()
        del data[missing]
        with pytest.raises(ValidationError):
            product_engine.create_product(data)

    def test_invalid_product_type(self, product_engine):
        with pytest.raises(ValidationError, match="Invalid product_type"):
            product_engine.create_product(product_data(product_type="MORTGAGE_PLUS"))

    def test_invalid_effective_date(self, product_engine):
        with pytest.raises(ValidationError):
            product_engine.create_product(product_data(effective_date="01/02/2024"))

    def test_expiry_before_effective_date(self, product_engine):
        """Test expiry date must not precede the effective date"""
        with pytest.raises(ValidationError, match="Expiry date"):
            product_engine.create_product(product_data(expiry_date="2023-12-31"))

    def test_product_code_too_long(self, product_engine):
        with pytest.raises(ValidationError):
            product_engine.create_product(product_data(code="P" * 51))

    def test_product_code_with_key_separator(self, product_engine):
        """Test product codes cannot hold the sub-resource key separator"""
        with pytest.raises(ValidationError, match="must not contain"):
            product_engine.create_product(product_data(code="SAV/001"))

    def test_duplicate_product_code(self, product_engine):
        """Test a product code with a current state cannot be created again"""
        product_engine.create_product(product_data())

        with pytest.raises(ValidationError, match="already exists"):
            product_engine.create_product(product_data(name="Duplicate"))

    def test_recreate_after_delete(self, product_engine):
        """Test a deleted product code can be created again"""
        product_engine.create_product(product_data(name="Old"))
        product_engine.delete_product("PROD001")

        product = product_engine.create_product(product_data(name="New"))

        assert product.product_name == "New"
        assert len(product_engine.product_history("PROD001")) == 3


class TestProductVersioning:
    """Test updates, deletes and history"""

    def test_update_returns_latest_state(self, product_engine):
        """Test CREATE then UPDATE resolves to the updated name"""
        product_engine.create_product(product_data(name="Test Product"))
        product_engine.update_product("PROD001", {"product_name": "Test Product Updated"})

        product = product_engine.get_product("PROD001")
        assert product.product_name == "Test Product Updated"
        assert product.crud_marker == CrudMarker.UPDATE

    def test_update_merges_over_current_state(self, product_engine):
        """Test fields not in the update keep their current values"""
        product_engine.create_product(product_data(description="Kept"))
        product = product_engine.update_product("PROD001", {"status": "ACTIVE"})

        assert product.status == ProductStatus.ACTIVE
        assert product.description == "Kept"
        assert product.product_name == "Test Product"

    def test_update_revalidates(self, product_engine):
        product_engine.create_product(product_data(expiry_date="2025-01-01"))

        with pytest.raises(ValidationError):
            product_engine.update_product("PROD001", {"effective_date": "2026-01-01"})

    def test_update_cannot_change_code(self, product_engine):
        product_engine.create_product(product_data())

        with pytest.raises(ValidationError):
            product_engine.update_product("PROD001", {"product_code": "PROD999"})

    def test_update_rejects_unknown_fields(self, product_engine):
        product_engine.create_product(product_data())

        with pytest.raises(ValidationError, match="Unknown fields"):
            product_engine.update_product("PROD001", {"colour": "blue"})

    def test_update_missing_product(self, product_engine):
        with pytest.raises(NotFoundError):
            product_engine.update_product("NOPE", {"product_name": "Ghost"})

    def test_delete_hides_product(self, product_engine):
        """Test CREATE, UPDATE, DELETE resolves to not found"""
        product_engine.create_product(product_data())
        product_engine.update_product("PROD001", {"product_name": "Updated"})
        product_engine.delete_product("PROD001")

        with pytest.raises(NotFoundError):
            product_engine.get_product("PROD001")
        assert product_engine.find_product("PROD001") is None
        assert product_engine.current_products() == []

    def test_deleted_and_missing_reported_alike(self, product_engine):
        """Test deleted and never-created products give the same error"""
        product_engine.create_product(product_data(code="GONE"))
        product_engine.delete_product("GONE")

        with pytest.raises(NotFoundError) as deleted:
            product_engine.get_product("GONE")
        with pytest.raises(NotFoundError) as missing:
            product_engine.get_product("NEVER")

        assert str(deleted.value) == "Product not found: GONE"
        assert str(missing.value) == "Product not found: NEVER"

    def test_delete_twice(self, product_engine):
        product_engine.create_product(product_data())
        product_engine.delete_product("PROD001")

        with pytest.raises(NotFoundError):
            product_engine.delete_product("PROD001")

    def test_delete_carries_last_payload(self, product_engine):
        product_engine.create_product(product_data(name="Final Name"))
        deleted = product_engine.delete_product("PROD001")

        assert deleted.crud_marker == CrudMarker.DELETE
        assert deleted.product_name == "Final Name"

    def test_history_newest_first(self, product_engine):
        """Test history keeps every version including the delete marker"""
        product_engine.create_product(product_data())
        product_engine.update_product("PROD001", {"product_name": "Updated"})
        product_engine.delete_product("PROD001")

        history = product_engine.product_history("PROD001")
        assert [v.crud_marker for v in history] == [
            CrudMarker.DELETE, CrudMarker.UPDATE, CrudMarker.CREATE
        ]
        assert history[2].product_name == "Test Product"

    def test_history_of_unknown_product(self, product_engine):
        with pytest.raises(NotFoundError):
            product_engine.product_history("NEVER")

    def test_products_versioned_independently(self, product_engine):
        """Test appends to one product never affect another"""
        product_engine.create_product(product_data(code="PROD001", name="First"))
        product_engine.create_product(product_data(code="PROD002", name="Second"))
        product_engine.update_product("PROD002", {"product_name": "Second Updated"})
        product_engine.delete_product("PROD002")

        assert product_engine.get_product("PROD001").product_name == "First"
        assert len(product_engine.product_history("PROD001")) == 1


class TestProductListing:
    """Test listing and search"""

    def test_list_excludes_deleted_before_paging(self, product_engine):
        """Test page totals count visible products only"""
        for i in range(5):
            product_engine.create_product(product_data(code=f"PROD00{i}"))
        product_engine.delete_product("PROD001")
        product_engine.delete_product("PROD003")

        page = product_engine.list_products(page=0, size=2)
        assert page.total == 3
        assert page.total_pages == 2
        assert [p.product_code for p in page.items] == ["PROD000", "PROD002"]

        last = product_engine.list_products(page=1, size=2)
        assert [p.product_code for p in last.items] == ["PROD004"]

    def test_search_by_type(self, product_engine):
        product_engine.create_product(product_data(code="SAV1"))
        product_engine.create_product(product_data(code="LOAN1", product_type="LOAN"))

        results = product_engine.search_products(product_type="LOAN")
        assert [p.product_code for p in results] == ["LOAN1"]

    def test_search_by_status(self, product_engine):
        product_engine.create_product(product_data(code="A", status="ACTIVE"))
        product_engine.create_product(product_data(code="B"))

        results = product_engine.search_products(status=ProductStatus.ACTIVE)
        assert [p.product_code for p in results] == ["A"]

    def test_type_filter_takes_precedence(self, product_engine):
        """Test only the first supplied filter is applied"""
        product_engine.create_product(product_data(code="A", status="ACTIVE"))
        product_engine.create_product(product_data(code="B", status="DRAFT"))

        results = product_engine.search_products(product_type="SAVINGS", status="ACTIVE")
        assert [p.product_code for p in results] == ["A", "B"]

    def test_search_by_effective_date_window(self, product_engine):
        """Test the date window excludes both boundaries"""
        product_engine.create_product(product_data(code="JAN", effective_date="2024-01-01"))
        product_engine.create_product(product_data(code="FEB", effective_date="2024-02-15"))
        product_engine.create_product(product_data(code="MAR", effective_date="2024-03-31"))

        results = product_engine.search_products(start_date="2024-01-01", end_date="2024-03-31")
        assert [p.product_code for p in results] == ["FEB"]

    def test_search_rejects_reversed_window(self, product_engine):
        with pytest.raises(ValidationError):
            product_engine.search_products(start_date="2024-03-01", end_date="2024-01-01")

    def test_search_without_filters(self, product_engine):
        product_engine.create_product(product_data(code="A"))
        product_engine.create_product(product_data(code="B"))
        product_engine.delete_product("B")

        assert [p.product_code for p in product_engine.search_products()] == ["A"]

    def test_search_skips_deleted_products(self, product_engine):
        product_engine.create_product(product_data(code="A", product_type="LOAN"))
        product_engine.delete_product("A")

        assert product_engine.search_products(product_type="LOAN") == []


class TestProductAvailability:
    """Test Product.is_available_on"""

    def test_availability_window(self, product_engine):
        product = product_engine.create_product(
            product_data(status="ACTIVE", expiry_date="2024-12-31")
        )
        assert product.is_available_on(date(2024, 6, 1))
        assert not product.is_available_on(date(2023, 12, 31))
        assert not product.is_available_on(date(2025, 1, 1))

    def test_draft_not_available(self, product_engine):
        product = product_engine.create_product(product_data())
        assert not product.is_available_on(date(2024, 6, 1))
