from recipepad.domains.recipes.entities import Recipe
from recipepad.domains.recipes.cache import (
    CACHE_CONTROL, CacheEntry, ListingCache, ListingOutcome, ListingResult
)
from recipepad.domains.recipes.schemas import (
    RecipeUpsert, RecipeBulkUpload, OkResponse, BulkUploadResponse, ExistsResponse
)

__all__ = [
    "Recipe",
    "CACHE_CONTROL", "CacheEntry", "ListingCache", "ListingOutcome", "ListingResult",
    "RecipeUpsert", "RecipeBulkUpload", "OkResponse", "BulkUploadResponse", "ExistsResponse",
]
