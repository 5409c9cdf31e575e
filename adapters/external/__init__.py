"""
외부 서비스 어댑터 패키지

HubSpot API, 분석 시스템과의 통신 및 토큰 암호화를 담당하는 어댑터들을 포함합니다.
"""

from .analytics_client import HttpAnalyticsSinkAdapter, LoggingAnalyticsSinkAdapter
from .encryption_service import EncryptionServiceAdapter
from .hubspot_api_client import HubspotApiClientAdapter

__all__ = [
    "HubspotApiClientAdapter",
    "HttpAnalyticsSinkAdapter",
    "LoggingAnalyticsSinkAdapter",
    "EncryptionServiceAdapter",
]
