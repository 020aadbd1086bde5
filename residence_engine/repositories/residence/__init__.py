from residence_engine.repositories.residence.residence_repository import ResidenceRepository

__all__ = ["ResidenceRepository"]
