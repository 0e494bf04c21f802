"""
Tests for the cart HTTP endpoints.
"""
import json
import pytest
from unittest.mock import patch
from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from vetshop.api.deps import get_cart_session, get_storage
from vetshop.api.routes.cart import (
    add_to_cart,
    clear_cart,
    dispatch_action,
    get_cart,
    get_cart_summary,
    remove_from_cart,
    update_cart_item,
)
from vetshop.core.config import settings
from vetshop.main import app
from vetshop.models.product import Product
from vetshop.schemas.cart import UpdateCartItemRequest
from vetshop.services.cart_service import CartService
from vetshop.services.storage.memory import InMemoryCartStorage

SESSION = "session-1"
KEY = f"vetshop:cart:{SESSION}"


@pytest.fixture
def storage():
    return InMemoryCartStorage()


@pytest.fixture
def cart_service(storage):
    return CartService(storage, key_prefix="vetshop:cart", low_stock_threshold=5)


class TestCartServiceDefaults:
    """Test the cart service falls back to configured values."""
    
    def test_defaults_from_settings(self):
        """Test omitted prefix and threshold come from settings."""
        service = CartService(InMemoryCartStorage())
        assert service.key_prefix == settings.CART_STORAGE_KEY_PREFIX
        assert service.low_stock_threshold == settings.LOW_STOCK_THRESHOLD
    
    def test_zero_threshold_is_kept(self):
        """Test an explicit zero threshold is not replaced by the default."""
        assert CartService(InMemoryCartStorage(), low_stock_threshold=0).low_stock_threshold == 0


class TestCartSessionDependency:
    """Test the session header dependency."""
    
    def test_valid_header(self):
        """Test the session id is stripped."""
        assert get_cart_session("  abc ") == "abc"
    
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_header(self, value):
        """Test a missing session is a 400."""
        with pytest.raises(HTTPException) as exc_info:
            get_cart_session(value)
        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST


class TestCartEndpoints:
    """Test route functions against in-memory storage."""
    
    def test_add_and_get(self, cart_service, storage):
        """Test adding products and reading the cart back."""
        add_to_cart(
            product=Product(id="p1", name="Croquetas", price=10, category="alimento", stock=20),
            session_id=SESSION,
            cart_service=cart_service
        )
        add_to_cart(
            product=Product(id="p1", name="Croquetas", price=10, category="alimento", stock=20),
            session_id=SESSION,
            cart_service=cart_service
        )
        result = add_to_cart(
            product=Product(id="p2", name="Pelota", price=5, category="juguetes", stock=2),
            session_id=SESSION,
            cart_service=cart_service
        )
        
        assert result.total == 25
        assert result.item_count == 3
        assert result.unique_items == 2
        assert [line.product_id for line in result.lines] == ["p1", "p2"]
        assert result.lines[0].subtotal == 20
        assert result.lines[0].category_label == "Alimento"
        assert result.low_stock_product_ids == ["p2"]
        assert json.loads(storage.read(KEY))["itemCount"] == 3
        
        fetched = get_cart(session_id=SESSION, cart_service=cart_service)
        assert fetched == result
    
    def test_product_without_stock_is_not_flagged(self, cart_service):
        """Test a snapshot with no stock field gets no stock or low-stock warning."""
        result = add_to_cart(
            product=Product(id="p1", price=10),
            session_id=SESSION,
            cart_service=cart_service
        )
        
        assert result.low_stock_product_ids == []
        assert result.lines[0].stock is None
        assert result.lines[0].stock_warning is False
    
    def test_summary(self, cart_service):
        """Test the badge summary."""
        store = cart_service.open_store(SESSION)
        store.add_to_cart(Product(id="p1", price=2.5))
        store.add_to_cart(Product(id="p1", price=2.5))
        
        summary = get_cart_summary(session_id=SESSION, cart_service=cart_service)
        assert summary.item_count == 2
        assert summary.total == 5
    
    def test_update_and_remove(self, cart_service, storage):
        """Test quantity updates, removal to zero and idempotent delete."""
        store = cart_service.open_store(SESSION)
        store.add_to_cart(Product(id="p1", price=10, stock=1))
        store.add_to_cart(Product(id="p2", price=5))
        
        result = update_cart_item(
            product_id="p1",
            request=UpdateCartItemRequest(quantity=3),
            session_id=SESSION,
            cart_service=cart_service
        )
        assert result.total == 35
        assert result.lines[0].stock_warning is True
        
        result = update_cart_item(
            product_id="p1",
            request=UpdateCartItemRequest(quantity=0),
            session_id=SESSION,
            cart_service=cart_service
        )
        assert [line.product_id for line in result.lines] == ["p2"]
        
        for _ in range(2):
            result = remove_from_cart(product_id="p2", session_id=SESSION, cart_service=cart_service)
            assert result.lines == []
            assert result.total == 0
        assert storage.read(KEY) is None
    
    def test_clear(self, cart_service, storage):
        """Test clearing empties the cart and its slot."""
        cart_service.open_store(SESSION).add_to_cart(Product(id="p1", price=10))
        
        result = clear_cart(session_id=SESSION, cart_service=cart_service)
        
        assert result.lines == []
        assert result.item_count == 0
        assert storage.read(KEY) is None
    
    def test_dispatch_action(self, cart_service):
        """Test tagged actions are dispatched verbatim."""
        dispatch_action(
            payload={"type": "ADD_TO_CART", "product": {"id": "p1", "price": 4}},
            session_id=SESSION,
            cart_service=cart_service
        )
        result = dispatch_action(
            payload={"type": "UPDATE_QUANTITY", "product_id": "p1", "quantity": 5},
            session_id=SESSION,
            cart_service=cart_service
        )
        assert result.total == 20
        assert result.item_count == 5
    
    def test_dispatch_rejects_load_cart(self, cart_service):
        """Test LOAD_CART cannot be sent by clients."""
        with pytest.raises(HTTPException) as exc_info:
            dispatch_action(
                payload={"type": "LOAD_CART", "snapshot": {"lines": []}},
                session_id=SESSION,
                cart_service=cart_service
            )
        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
    
    def test_dispatch_rejects_unknown_action(self, cart_service):
        """Test unknown action tags are validation errors."""
        with pytest.raises(RequestValidationError):
            dispatch_action(
                payload={"type": "CHECKOUT"},
                session_id=SESSION,
                cart_service=cart_service
            )


class TestCartApi:
    """Test the cart API over HTTP."""
    
    @pytest.fixture
    def client(self, storage):
        app.dependency_overrides[get_storage] = lambda: storage
        yield TestClient(app)
        app.dependency_overrides.clear()
    
    def test_health(self, client):
        """Test the health endpoint."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
    
    def test_lifespan_builds_storage_once(self):
        """Test startup builds the configured storage and shutdown releases it."""
        get_storage.cache_clear()
        with patch("vetshop.api.deps.build_storage", return_value=InMemoryCartStorage()) as build:
            with TestClient(app) as client:
                assert client.get("/health").json()["status"] == "healthy"
                get_storage()
            build.assert_called_once()
        assert get_storage.cache_info().currsize == 0
    
    def test_missing_session_header(self, client):
        """Test requests without a session are rejected."""
        response = client.get("/api/cart")
        assert response.status_code == 400
    
    def test_cart_flow(self, client, storage):
        """Test add, read and clear over HTTP."""
        headers = {"X-Cart-Session": SESSION}
        
        response = client.post(
            "/api/cart/items",
            json={"_id": "p1", "nombre": "Shampoo", "precio": 12.0, "categoria": "higiene", "stock": 3},
            headers=headers
        )
        assert response.status_code == 201
        body = response.json()
        assert body["itemCount"] == 1
        assert body["total"] == 12.0
        assert body["lines"][0]["category_label"] == "Higiene"
        
        response = client.get("/api/cart/summary", headers=headers)
        assert response.json() == {"itemCount": 1, "total": 12.0}
        
        response = client.delete("/api/cart", headers=headers)
        assert response.status_code == 200
        assert response.json()["lines"] == []
        assert storage.read(KEY) is None
    
    def test_invalid_product_is_422(self, client):
        """Test products without an id are rejected by validation."""
        response = client.post(
            "/api/cart/items",
            json={"name": "No id", "price": 1},
            headers={"X-Cart-Session": SESSION}
        )
        assert response.status_code == 422
    
    def test_invalid_action_is_422(self, client):
        """Test malformed actions are rejected by validation."""
        response = client.post(
            "/api/cart/actions",
            json={"type": "UPDATE_QUANTITY"},
            headers={"X-Cart-Session": SESSION}
        )
        assert response.status_code == 422


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
