from .entity_status_repository import EntityStatusRepository, MODEL_BY_KIND

__all__ = ["EntityStatusRepository", "MODEL_BY_KIND"]
