from .physician import NAME_MAX_LENGTH, NAME_MIN_LENGTH, Physician

__all__ = ["Physician", "NAME_MIN_LENGTH", "NAME_MAX_LENGTH"]
