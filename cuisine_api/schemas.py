import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError


def _required_text(value: Any, error_type: str, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError(error_type, message)
    return value.strip()


def _is_truthy(value: Any) -> bool:
    # None, False, 0, NaN and "" are false; anything else, even "false", is true
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    return True


class RecipeTitle(BaseModel):
    """Body of POST /recipes and PUT /recipes/{id}."""

    title: str = Field(
        None,
        validate_default=True,
        json_schema_extra={"example": "Simple Pancakes"},
    )

    @field_validator("title", mode="before")
    @classmethod
    def title_required(cls, v):
        return _required_text(v, "title_required", "Title is required")


class FavoriteToggle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_favorite: bool = Field(False, alias="isFavorite")

    @field_validator("is_favorite", mode="before")
    @classmethod
    def coerce_flag(cls, v):
        return _is_truthy(v)


class IngredientCreate(BaseModel):
    """Fields are checked in declaration order: name, quantity, unit."""

    name: str = Field(
        None, validate_default=True, json_schema_extra={"example": "flour"}
    )
    quantity: float = Field(
        None, validate_default=True, json_schema_extra={"example": 250}
    )
    unit: str = Field(
        None, validate_default=True, json_schema_extra={"example": "g"}
    )

    @field_validator("name", mode="before")
    @classmethod
    def name_required(cls, v):
        return _required_text(
            v, "ingredient_name_required", "Ingredient name required"
        )

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_numeric(cls, v):
        error = PydanticCustomError(
            "ingredient_quantity_required", "Ingredient quantity required"
        )
        if v is None or isinstance(v, bool):
            raise error
        if isinstance(v, str):
            # float() also reads digit separators such as "1_000"
            if "_" in v:
                raise error
            v = v.strip()
        try:
            number = float(v)
        except (TypeError, ValueError, OverflowError):
            raise error
        if not math.isfinite(number):
            raise error
        return number

    @field_validator("unit", mode="before")
    @classmethod
    def unit_required(cls, v):
        return _required_text(
            v, "ingredient_unit_required", "Ingredient unit required"
        )


class InstructionCreate(BaseModel):
    text: str = Field(
        None,
        validate_default=True,
        json_schema_extra={"example": "Mix dry ingredients"},
    )

    @field_validator("text", mode="before")
    @classmethod
    def text_required(cls, v):
        return _required_text(
            v, "instruction_text_required", "Instruction text required"
        )


class Recipe(BaseModel):
    id: int
    title: str
    photo: Optional[str] = None
    is_favorite: bool = False
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class RecipeCreated(BaseModel):
    id: int
    title: str


class Ingredient(BaseModel):
    id: int
    recipe_id: int
    name: str
    quantity: float
    unit: str

    model_config = ConfigDict(from_attributes=True)


class Instruction(BaseModel):
    id: int
    recipe_id: int
    step_number: int
    text: str

    model_config = ConfigDict(from_attributes=True)


class Photo(BaseModel):
    photo: str


class Success(BaseModel):
    success: bool = True
