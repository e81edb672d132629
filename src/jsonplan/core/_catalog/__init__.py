from jsonplan.core._catalog.in_memory import EmptyCatalog, InMemoryCatalog

__all__ = ["EmptyCatalog", "InMemoryCatalog"]
