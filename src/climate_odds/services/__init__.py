"""
Application Services
====================

- sample_assembler: window → samples through a data source
- climate_query_service: full query orchestration (cache, aggregation, export)
"""

from .climate_query_service import ClimateQueryService
from .sample_assembler import assemble

__all__ = ["ClimateQueryService", "assemble"]
