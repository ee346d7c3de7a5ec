"""Item registry and remote recipe sources for the catalog browser."""

# Delay the requests import until a remote oracle is actually used
__all__ = ["HttpRecipeOracle", "RecipeLookupError"]

def __getattr__(name):  # pragma: no cover - simple lazy loader
    if name in __all__:
        from .recipes_http import HttpRecipeOracle, RecipeLookupError
        globals().update({"HttpRecipeOracle": HttpRecipeOracle, "RecipeLookupError": RecipeLookupError})
        return globals()[name]
    raise AttributeError(name)
