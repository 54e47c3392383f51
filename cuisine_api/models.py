from sqlalchemy import (
    BigInteger, Boolean, Column, Float, ForeignKey, Integer, Text, text,
)
# relationship not used; cascades are enforced by the database
from .db import Base


class Recipe(Base):
    __tablename__ = "recipes"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    photo = Column(Text, nullable=True)  # filename in the upload store
    is_favorite = Column(
        Boolean, nullable=False, default=False, server_default=text("0")
    )
    created_at = Column(BigInteger)  # epoch milliseconds
    updated_at = Column(BigInteger)  # epoch milliseconds


class Ingredient(Base):
    __tablename__ = "ingredients"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    quantity = Column(Float, nullable=False)
    unit = Column(Text, nullable=False)


class Instruction(Base):
    __tablename__ = "instructions"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    step_number = Column(Integer, nullable=False)
    text = Column(Text, nullable=False)
