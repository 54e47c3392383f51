import json
from pathlib import Path

import structlog
from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import crud, schemas

logger = structlog.get_logger()


def load_recipes(path):
    """Load recipe documents from a JSON file.

    Each document looks like::

        {"title": "Pancakes",
         "ingredients": [{"name": "flour", "quantity": 200, "unit": "g"}],
         "instructions": ["Mix", "Cook"]}

    Args:
        path (str or Path): Path to the JSON file.

    Returns:
        list: recipe documents, or an empty list if the file is missing.
    """
    p = Path(path)
    if not p.exists():
        return []
    with p.open("r", encoding="utf-8") as f:
        return json.load(f)


def import_recipes(db: Session, records) -> int:
    """Insert recipe documents that are not already present by title.

    Returns the number of recipes added.
    """
    added = 0
    for r in records:
        try:
            recipe = schemas.RecipeTitle.model_validate(r)
            ingredients = [
                schemas.IngredientCreate.model_validate(i)
                for i in r.get("ingredients", [])
            ]
            instructions = [
                schemas.InstructionCreate.model_validate({"text": t})
                for t in r.get("instructions", [])
            ]
        except ValidationError as e:
            logger.warning(
                "Skipping invalid recipe", title=r.get("title"), error=str(e)
            )
            continue
        if crud.get_recipe_by_title(db, recipe.title):
            continue
        db_recipe = crud.create_recipe(db, recipe)
        for ingredient in ingredients:
            crud.create_ingredient(db, db_recipe.id, ingredient)
        for instruction in instructions:
            crud.create_instruction(db, db_recipe.id, instruction)
        added += 1
    logger.info("Imported recipes", added=added)
    return added
