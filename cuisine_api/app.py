from contextlib import asynccontextmanager
from typing import Any, List, Optional, Union

import structlog
from fastapi import (
    APIRouter, Body, Depends, FastAPI, File, HTTPException, Request, UploadFile,
)
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import crud, schemas
from .config import Settings, get_settings
from .db import Database
from .logs import RequestLoggingMiddleware, configure_logging
from .uploads import UploadStore

logger = structlog.get_logger()

router = APIRouter()


def get_db(request: Request):
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_upload_store(request: Request) -> UploadStore:
    return request.app.state.uploads


def _validated(model, payload):
    # a missing or non-object JSON body is validated as an empty object
    if not isinstance(payload, dict):
        payload = {}
    return model.model_validate(payload)


def _first_error_message(errors) -> str:
    if not errors:
        return "Invalid request"
    return errors[0].get("msg", "Invalid request")


@router.get("/", response_class=PlainTextResponse)
def read_root():
    return "My Cuisine API is running"


# Recipes

@router.get("/recipes", response_model=List[schemas.Recipe])
def list_recipes(db: Session = Depends(get_db)):
    return crud.get_recipes(db)


@router.get("/recipes/favorites", response_model=List[schemas.Recipe])
def list_favorite_recipes(db: Session = Depends(get_db)):
    return crud.get_favorite_recipes(db)


@router.post("/recipes", response_model=schemas.RecipeCreated)
def create_recipe(
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    recipe = _validated(schemas.RecipeTitle, payload)
    db_recipe = crud.create_recipe(db, recipe)
    logger.info("Recipe created", recipe_id=db_recipe.id)
    return {"id": db_recipe.id, "title": db_recipe.title}


@router.get("/recipes/{recipe_id}", response_model=schemas.Recipe)
def get_recipe(recipe_id: int, db: Session = Depends(get_db)):
    r = crud.get_recipe(db, recipe_id)
    if not r:
        raise HTTPException(status_code=404, detail="Not found")
    return r


@router.put("/recipes/{recipe_id}", response_model=schemas.Success)
def update_recipe(
    recipe_id: int,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    recipe = _validated(schemas.RecipeTitle, payload)
    crud.update_recipe_title(db, recipe_id, recipe)
    return {"success": True}


@router.patch("/recipes/{recipe_id}/favorite", response_model=schemas.Success)
def toggle_favorite(
    recipe_id: int,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    toggle = _validated(schemas.FavoriteToggle, payload)
    crud.set_favorite(db, recipe_id, toggle.is_favorite)
    return {"success": True}


@router.delete("/recipes/{recipe_id}", response_model=schemas.Success)
def delete_recipe(recipe_id: int, db: Session = Depends(get_db)):
    count = crud.delete_recipe(db, recipe_id)
    logger.info("Recipe deleted", recipe_id=recipe_id, rows=count)
    return {"success": True}


@router.post("/recipes/{recipe_id}/photo", response_model=schemas.Photo)
def upload_photo(
    recipe_id: int,
    photo: Union[UploadFile, str, None] = File(None),
    db: Session = Depends(get_db),
    store: UploadStore = Depends(get_upload_store),
):
    # a plain text field under the same name is not a file
    if photo is None or isinstance(photo, str) or not photo.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    filename = store.save(photo)
    crud.set_photo(db, recipe_id, filename)
    return {"photo": filename}


# Ingredients

@router.get(
    "/recipes/{recipe_id}/ingredients", response_model=List[schemas.Ingredient]
)
def list_ingredients(recipe_id: int, db: Session = Depends(get_db)):
    return crud.get_ingredients(db, recipe_id)


@router.post(
    "/recipes/{recipe_id}/ingredients", response_model=schemas.Ingredient
)
def create_ingredient(
    recipe_id: int,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    ingredient = _validated(schemas.IngredientCreate, payload)
    return crud.create_ingredient(db, recipe_id, ingredient)


@router.delete("/ingredients/{ingredient_id}", response_model=schemas.Success)
def delete_ingredient(ingredient_id: int, db: Session = Depends(get_db)):
    crud.delete_ingredient(db, ingredient_id)
    return {"success": True}


# Instructions

@router.get(
    "/recipes/{recipe_id}/instructions",
    response_model=List[schemas.Instruction],
)
def list_instructions(recipe_id: int, db: Session = Depends(get_db)):
    return crud.get_instructions(db, recipe_id)


@router.post(
    "/recipes/{recipe_id}/instructions", response_model=schemas.Instruction
)
def create_instruction(
    recipe_id: int,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    instruction = _validated(schemas.InstructionCreate, payload)
    return crud.create_instruction(db, recipe_id, instruction)


@router.delete(
    "/instructions/{instruction_id}", response_model=schemas.Success
)
def delete_instruction(instruction_id: int, db: Session = Depends(get_db)):
    crud.delete_instruction(db, instruction_id)
    return {"success": True}


# Error responses

async def validation_error_handler(request: Request, exc):
    message = _first_error_message(exc.errors())
    logger.info("Rejected request", path=request.url.path, message=message)
    return JSONResponse(status_code=400, content={"message": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    error = getattr(exc, "orig", None) or exc
    logger.error(
        "Storage error",
        path=request.url.path,
        method=request.method,
        error=str(error),
        error_type=type(error).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={"message": "Database error", "error": str(error)},
    )


async def file_error_handler(request: Request, exc: OSError):
    logger.error(
        "File storage error",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return JSONResponse(
        status_code=500,
        content={"message": "File storage error", "error": str(exc)},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    database = Database(settings.database_url)
    uploads = UploadStore(settings.UPLOADS_DIR)
    # StaticFiles checks the directory when mounted
    uploads.ensure()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting My Cuisine API", database=str(settings.DATABASE_PATH))
        database.init_db()
        yield
        database.close()

    app = FastAPI(
        title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan
    )
    app.state.settings = settings
    app.state.database = database
    app.state.uploads = uploads

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(OSError, file_error_handler)

    app.include_router(router)
    app.mount(
        "/uploads",
        StaticFiles(directory=str(settings.UPLOADS_DIR)),
        name="uploads",
    )
    return app
