from sqlalchemy import Column, Index, Text

from recipepad.db.base import Base, JSONDocument, TimestampMixin


class Recipe(TimestampMixin, Base):
    """Глобальные (опубликованные) рецепты"""
    __tablename__ = "recipes"

    id = Column(Text, primary_key=True)
    data = Column(JSONDocument, nullable=False)

    __table_args__ = (Index("ix_recipes_updated_at", "updated_at"),)


class LocalRecipe(TimestampMixin, Base):
    """Локальные рецепты по владельцу"""
    __tablename__ = "local_recipes"

    owner = Column(Text, primary_key=True)
    id = Column(Text, primary_key=True)
    data = Column(JSONDocument, nullable=False)

    __table_args__ = (Index("ix_local_recipes_owner_updated_at", "owner", "updated_at"),)
