from residence_engine.models.residence.residence import Residence
from residence_engine.models.residence.target import ResidenceTarget

__all__ = ["Residence", "ResidenceTarget"]
