"""
Base service layer shared by resource services
"""

import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None
    page_info: Optional[Dict[str, Any]] = None

    @classmethod
    def ok(cls, data: List[Dict[str, Any]], page_info: Optional[Dict[str, Any]] = None) -> "ServiceResult":
        return cls(success=True, data=data, count=len(data), page_info=page_info)

    @classmethod
    def failure(cls, error: str, error_type: str) -> "ServiceResult":
        return cls(success=False, error=error, error_type=error_type)


class BaseService:
    """Base service holding the resource name used in log lines and errors"""

    def __init__(self, resource_name: str):
        self.resource_name = resource_name
        logger.info(f"BaseService initialized for resource: {resource_name}")

    def not_found(self, resource_id: Any) -> ServiceResult:
        return ServiceResult.failure(
            f"{self.resource_name} record not found: {resource_id}",
            "RESOURCE_NOT_FOUND"
        )

    def conflict(self, resource_id: Any) -> ServiceResult:
        return ServiceResult.failure(
            f"{self.resource_name} record already exists: {resource_id}",
            "CONFLICT_ERROR"
        )
