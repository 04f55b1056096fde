from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # JSON uses camelCase keys; snake_case is accepted on input too
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class StoreBase(CamelModel):
    name: str = Field(..., json_schema_extra={"example": "Corner Market"})
    location: Optional[str] = Field(
        None, json_schema_extra={"example": "12 Main St"}
    )


class StoreCreate(StoreBase):
    pass


class ItemBase(CamelModel):
    name: str = Field(..., json_schema_extra={"example": "Milk"})
    price: float = Field(..., json_schema_extra={"example": 1.29})
    unit: str = Field(..., json_schema_extra={"example": "l"})
    store_id: str


class ItemCreate(ItemBase):
    pass


class IngredientBase(CamelModel):
    item_name: str = Field(..., json_schema_extra={"example": "flour"})
    quantity: float = Field(..., json_schema_extra={"example": 0.5})
    unit: str = Field(..., json_schema_extra={"example": "kg"})


class IngredientCreate(IngredientBase):
    pass


class RecipeBase(CamelModel):
    name: str = Field(..., json_schema_extra={"example": "Simple Pancakes"})
    description: Optional[str] = Field(
        None, json_schema_extra={"example": "Fluffy breakfast pancakes"}
    )


class RecipeCreate(RecipeBase):
    ingredients: List[IngredientCreate] = Field(
        default_factory=list,
        json_schema_extra={
            "example": [
                {"itemName": "flour", "quantity": 0.25, "unit": "kg"},
                {"itemName": "milk", "quantity": 0.3, "unit": "l"},
                {"itemName": "egg", "quantity": 2, "unit": "pc"},
            ]
        },
    )


class Store(StoreBase):
    id: str
    created_at: datetime
    updated_at: datetime


class Item(ItemBase):
    id: str
    created_at: datetime
    updated_at: datetime


class StoreWithItems(Store):
    items: List[Item] = Field(default_factory=list)


class ItemWithStore(Item):
    store: Store


class Ingredient(IngredientBase):
    id: str
    recipe_id: str


class Recipe(RecipeBase):
    id: str
    created_at: datetime
    updated_at: datetime
    ingredients: List[Ingredient] = Field(default_factory=list)


class StorePrice(CamelModel):
    """Score of one store for a recipe."""
    store: StoreWithItems
    total_price: float
    all_items_available: bool


class NoCheapestStore(CamelModel):
    message: str
    store_prices: List[StorePrice]


class Deleted(CamelModel):
    deleted: bool = True


class Health(CamelModel):
    status: str = "ok"
    message: str = "Server is running"
