"""
Catalog Module - Versioned IELTS reference data.

Components:
- version_resolver: explicit or active catalog version lookup
- catalog_service: aggregate catalog, versions listing, readiness
- question_options_service: boolean option sets (true_false, yes_no)
- type_metadata_service: type cards with guaranteed fallback
- schemas: outbound response models
"""

from src.catalog.catalog_service import CatalogService
from src.catalog.question_options_service import QuestionOptionsService, normalize_option_value
from src.catalog.type_metadata_service import TypeMetadataResult, TypeMetadataService
from src.catalog.version_resolver import resolve_version

__all__ = [
    "CatalogService",
    "QuestionOptionsService",
    "TypeMetadataResult",
    "TypeMetadataService",
    "normalize_option_value",
    "resolve_version",
]
