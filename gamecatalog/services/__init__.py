from __future__ import annotations

from gamecatalog.services.enrichment_service import BatchResult, EnrichmentService
from gamecatalog.services.lookup_orchestrator import LookupOrchestrator, ResolutionResult

__all__: list[str] = [
    "BatchResult",
    "EnrichmentService",
    "LookupOrchestrator",
    "ResolutionResult",
]
