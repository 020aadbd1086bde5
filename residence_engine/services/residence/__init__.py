from residence_engine.services.residence.direct_allocation_service import DirectAllocationService
from residence_engine.services.residence.residence_ledger import ResidenceLedger, bed_label_for

__all__ = ["DirectAllocationService", "ResidenceLedger", "bed_label_for"]
