import time
from typing import Optional

from sqlalchemy import func, insert, literal, select
from sqlalchemy.orm import Session

from . import models, schemas


def now_ms() -> int:
    return int(time.time() * 1000)


# Recipes

def get_recipes(db: Session):
    return db.query(models.Recipe).order_by(models.Recipe.id.desc()).all()


def get_favorite_recipes(db: Session):
    return (
        db.query(models.Recipe)
        .filter(models.Recipe.is_favorite.is_(True))
        .order_by(models.Recipe.updated_at.desc())
        .all()
    )


def get_recipe(db: Session, recipe_id: int):
    return db.query(models.Recipe).filter(models.Recipe.id == recipe_id).first()


def get_recipe_by_title(db: Session, title: str):
    return db.query(models.Recipe).filter(models.Recipe.title == title).first()


def create_recipe(db: Session, recipe: schemas.RecipeTitle):
    now = now_ms()
    db_recipe = models.Recipe(title=recipe.title, created_at=now, updated_at=now)
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def _update_recipe(db: Session, recipe_id: int, values: dict) -> int:
    values["updated_at"] = now_ms()
    count = (
        db.query(models.Recipe)
        .filter(models.Recipe.id == recipe_id)
        .update(values, synchronize_session=False)
    )
    db.commit()
    return count


def update_recipe_title(db: Session, recipe_id: int, recipe: schemas.RecipeTitle):
    return _update_recipe(db, recipe_id, {"title": recipe.title})


def set_favorite(db: Session, recipe_id: int, is_favorite: bool):
    return _update_recipe(db, recipe_id, {"is_favorite": is_favorite})


def set_photo(db: Session, recipe_id: int, filename: Optional[str]):
    return _update_recipe(db, recipe_id, {"photo": filename})


def delete_recipe(db: Session, recipe_id: int) -> int:
    # owned ingredients and instructions go with it (ON DELETE CASCADE)
    count = (
        db.query(models.Recipe)
        .filter(models.Recipe.id == recipe_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return count


# Ingredients

def get_ingredients(db: Session, recipe_id: int):
    return (
        db.query(models.Ingredient)
        .filter(models.Ingredient.recipe_id == recipe_id)
        .order_by(models.Ingredient.id.asc())
        .all()
    )


def create_ingredient(
    db: Session, recipe_id: int, ingredient: schemas.IngredientCreate
):
    db_ingredient = models.Ingredient(
        recipe_id=recipe_id,
        name=ingredient.name,
        quantity=ingredient.quantity,
        unit=ingredient.unit,
    )
    db.add(db_ingredient)
    db.commit()
    db.refresh(db_ingredient)
    return db_ingredient


def delete_ingredient(db: Session, ingredient_id: int) -> int:
    count = (
        db.query(models.Ingredient)
        .filter(models.Ingredient.id == ingredient_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return count


# Instructions

def get_instructions(db: Session, recipe_id: int):
    return (
        db.query(models.Instruction)
        .filter(models.Instruction.recipe_id == recipe_id)
        .order_by(models.Instruction.step_number.asc())
        .all()
    )


def create_instruction(
    db: Session, recipe_id: int, instruction: schemas.InstructionCreate
):
    """Append a step numbered max(step_number) + 1 for the recipe.

    The max lookup and the insert run as one INSERT ... SELECT statement so
    two concurrent appends to the same recipe cannot read the same max.
    """
    table = models.Instruction.__table__
    next_step = (
        select(
            literal(recipe_id),
            func.coalesce(func.max(table.c.step_number), 0) + 1,
            literal(instruction.text),
        )
        .where(table.c.recipe_id == recipe_id)
    )
    stmt = insert(table).from_select(
        ["recipe_id", "step_number", "text"], next_step
    )
    instruction_id = db.execute(stmt).lastrowid
    db.commit()
    return db.get(models.Instruction, instruction_id)


def delete_instruction(db: Session, instruction_id: int) -> int:
    # remaining steps keep their numbers
    count = (
        db.query(models.Instruction)
        .filter(models.Instruction.id == instruction_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return count
