from .physician_repository import IMAGEABLE_TYPE, PhysicianRepository

__all__ = ["PhysicianRepository", "IMAGEABLE_TYPE"]
