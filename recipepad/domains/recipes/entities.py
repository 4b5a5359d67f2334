from datetime import datetime
from typing import Any, Dict, Optional


class Recipe:
    """Сущность рецепта: непрозрачный JSON-документ с идентификатором"""

    def __init__(
        self,
        id: str,
        data: Dict[str, Any],
        owner: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.data = data
        self.owner = owner
        self.created_at = created_at
        self.updated_at = updated_at

    def to_payload(self) -> Dict[str, Any]:
        """Документ в том виде, в котором его видит клиент: {...data, id}"""
        return {**self.data, "id": self.id}

    def __eq__(self, other) -> bool:
        if not isinstance(other, Recipe):
            return False
        return self.id == other.id and self.owner == other.owner

    def __repr__(self) -> str:
        if self.owner is not None:
            return f"Recipe(owner={self.owner}, id={self.id}, updated_at={self.updated_at})"
        return f"Recipe(id={self.id}, updated_at={self.updated_at})"
