"""Patient lookup used when authoring a schedule; the schedule core stores only the id"""

from .router import router

__all__ = ["router"]
