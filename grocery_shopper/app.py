import logging
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import List, Optional, Union

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.exception_handlers import (
    http_exception_handler,
    request_validation_exception_handler,
)
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import crud, pricing, schemas
from .config import config
from .db import SessionLocal, engine, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB once at startup
    init_db()
    logger.info("Database ready")
    yield
    engine.dispose()
    logger.info("Database connections closed")


app = FastAPI(title="Cheap Grocery Shopper", lifespan=lifespan)

package_dir = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(package_dir / "templates"))
app.mount("/static", StaticFiles(directory=str(package_dir / "static")), name="static")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def api_error_handler(request: Request, exc: StarletteHTTPException):
    # API clients get {"error": ...}; everything else keeps the default body
    if request.url.path.startswith("/api"):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )
    return await http_exception_handler(request, exc)


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts) or "Invalid request"


@app.exception_handler(RequestValidationError)
async def api_validation_handler(request: Request, exc: RequestValidationError):
    if request.url.path.startswith("/api"):
        return JSONResponse(
            status_code=422,
            content={"error": f"Invalid request: {_describe_validation(exc)}"},
        )
    return await request_validation_exception_handler(request, exc)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def failure_as_500(db: Session, message: str):
    """Turn any unexpected error into a 500 carrying `message`."""
    try:
        yield
    except HTTPException:
        raise
    except Exception:
        logger.exception(message)
        db.rollback()
        raise HTTPException(status_code=500, detail=message)


def _not_found(what: str):
    return HTTPException(status_code=404, detail=f"{what} not found")


@app.get("/api/health", response_model=schemas.Health)
def health():
    return schemas.Health()


# Stores

@app.get("/api/stores", response_model=List[schemas.StoreWithItems])
def list_stores(
    q: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    with failure_as_500(db, "Failed to fetch stores"):
        return crud.get_stores(db, skip=skip, limit=limit, q=q)


@app.post("/api/stores", response_model=schemas.Store, status_code=201)
def create_store(store: schemas.StoreCreate, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to create store"):
        return crud.create_store(db, store)


@app.get("/api/stores/{store_id}", response_model=schemas.StoreWithItems)
def get_store(store_id: str, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to fetch store"):
        s = crud.get_store(db, store_id)
        if not s:
            raise _not_found("Store")
        return s


@app.put("/api/stores/{store_id}", response_model=schemas.StoreWithItems)
def update_store(store_id: str, store: schemas.StoreCreate, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to update store"):
        s = crud.update_store(db, store_id, store)
        if not s:
            raise _not_found("Store")
        return s


@app.delete("/api/stores/{store_id}", response_model=schemas.Deleted)
def delete_store(store_id: str, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to delete store"):
        if not crud.delete_store(db, store_id):
            raise _not_found("Store")
        return schemas.Deleted()


# Items

@app.get("/api/items", response_model=List[schemas.ItemWithStore])
def list_items(
    q: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    with failure_as_500(db, "Failed to fetch items"):
        return crud.get_items(db, skip=skip, limit=limit, q=q)


@app.post("/api/items", response_model=schemas.Item, status_code=201)
def create_item(item: schemas.ItemCreate, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to create item"):
        return crud.create_item(db, item)


@app.get("/api/items/{item_id}", response_model=schemas.ItemWithStore)
def get_item(item_id: str, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to fetch item"):
        it = crud.get_item(db, item_id)
        if not it:
            raise _not_found("Item")
        return it


@app.put("/api/items/{item_id}", response_model=schemas.ItemWithStore)
def update_item(item_id: str, item: schemas.ItemCreate, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to update item"):
        it = crud.update_item(db, item_id, item)
        if not it:
            raise _not_found("Item")
        return it


@app.delete("/api/items/{item_id}", response_model=schemas.Deleted)
def delete_item(item_id: str, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to delete item"):
        if not crud.delete_item(db, item_id):
            raise _not_found("Item")
        return schemas.Deleted()


# Recipes

@app.get("/api/recipes", response_model=List[schemas.Recipe])
def list_recipes(
    q: Optional[str] = None,
    skip: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    with failure_as_500(db, "Failed to fetch recipes"):
        return crud.get_recipes(db, skip=skip, limit=limit, q=q)


@app.post("/api/recipes", response_model=schemas.Recipe, status_code=201)
def create_recipe(recipe: schemas.RecipeCreate, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to create recipe"):
        return crud.create_recipe(db, recipe)


@app.get("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def get_recipe(recipe_id: str, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to fetch recipe"):
        r = crud.get_recipe(db, recipe_id)
        if not r:
            raise _not_found("Recipe")
        return r


@app.put("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def update_recipe(recipe_id: str, recipe: schemas.RecipeCreate, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to update recipe"):
        r = crud.update_recipe(db, recipe_id, recipe)
        if not r:
            raise _not_found("Recipe")
        return r


@app.delete("/api/recipes/{recipe_id}", response_model=schemas.Deleted)
def delete_recipe(recipe_id: str, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to delete recipe"):
        if not crud.delete_recipe(db, recipe_id):
            raise _not_found("Recipe")
        return schemas.Deleted()


def _store_price_out(sp: pricing.StorePrice) -> schemas.StorePrice:
    return schemas.StorePrice(
        store=schemas.StoreWithItems.model_validate(sp.store),
        total_price=sp.total_price,
        all_items_available=sp.all_items_available,
    )


@app.get(
    "/api/recipes/{recipe_id}/cheapest-store",
    response_model=Union[schemas.StorePrice, schemas.NoCheapestStore],
)
def cheapest_store(recipe_id: str, db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to find cheapest store"):
        recipe = crud.get_recipe(db, recipe_id)
        if not recipe:
            raise _not_found("Recipe")

        store_prices = pricing.price_stores(recipe.ingredients, crud.get_all_stores(db))
        best = pricing.find_cheapest(store_prices)
        if best is None:
            return schemas.NoCheapestStore(
                message="No store has all ingredients",
                store_prices=[_store_price_out(sp) for sp in store_prices]
            )
        return _store_price_out(best)


# HTML dashboard

@app.get("/", response_class=HTMLResponse)
def dashboard(request: Request, db: Session = Depends(get_db)):
    try:
        stores = crud.get_all_stores(db)
        items = crud.get_items(db)
        recipes = crud.get_recipes(db)
        status = f"Connected: {schemas.Health().message}"
    except Exception:
        logger.exception("Failed to load data")
        db.rollback()
        stores, items, recipes = [], [], []
        status = "Failed to load data from the database"
    return templates.TemplateResponse(
        request,
        "index.html",
        {"status": status, "stores": stores, "items": items, "recipes": recipes},
    )


@app.post("/stores/sample")
def create_sample_store(db: Session = Depends(get_db)):
    with failure_as_500(db, "Failed to create store"):
        crud.create_store(
            db, schemas.StoreCreate(name="Sample Store", location="Sample Location")
        )
    return RedirectResponse(url="/", status_code=303)
