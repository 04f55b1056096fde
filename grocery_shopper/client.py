"""Small typed wrapper around the JSON API."""
from typing import Any, Dict, List, Optional

import httpx

API_PREFIX = "/api"


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"API request failed: {status_code} {message}")
        self.status_code = status_code
        self.message = message


class ApiClient:
    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        # an existing client (e.g. a TestClient) can be passed in
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _request(self, method: str, endpoint: str, json: Any = None) -> Any:
        response = self.http.request(method, f"{API_PREFIX}{endpoint}", json=json)
        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except (ValueError, AttributeError):
                message = response.reason_phrase
            raise ApiError(response.status_code, str(message))
        return response.json()

    def health_check(self) -> Dict[str, str]:
        return self._request("GET", "/health")

    # Stores

    def get_stores(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/stores")

    def create_store(self, name: str, location: Optional[str] = None) -> Dict[str, Any]:
        return self._request("POST", "/stores", json={"name": name, "location": location})

    # Items

    def get_items(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/items")

    def create_item(self, name: str, price: float, unit: str, store_id: str) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/items",
            json={"name": name, "price": price, "unit": unit, "storeId": store_id},
        )

    # Recipes

    def get_recipes(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/recipes")

    def create_recipe(
        self,
        name: str,
        ingredients: List[Dict[str, Any]],
        description: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create a recipe.

        `ingredients` is a list of ``{"itemName", "quantity", "unit"}`` dicts.
        """
        return self._request(
            "POST",
            "/recipes",
            json={"name": name, "description": description, "ingredients": ingredients},
        )

    def find_cheapest_store(self, recipe_id: str) -> Dict[str, Any]:
        """Winning store entry, or a ``message`` plus ``storePrices`` when none qualifies."""
        return self._request("GET", f"/recipes/{recipe_id}/cheapest-store")
