from jsonplan.api.config import CatalogPlanCompilation, CatalogPlanRestore, SerdeConfig

__all__ = ["CatalogPlanCompilation", "CatalogPlanRestore", "SerdeConfig"]
