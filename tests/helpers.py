"""테스트용 HubSpot 응답 생성 함수"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def api_record(
    record_id: str,
    updated_at: datetime,
    created_at: Optional[datetime] = None,
    **properties: Any,
) -> Dict[str, Any]:
    """검색 API 결과 항목을 만듭니다."""
    return {
        "id": record_id,
        "createdAt": (created_at or updated_at).isoformat().replace("+00:00", "Z"),
        "updatedAt": updated_at.isoformat().replace("+00:00", "Z"),
        "properties": properties,
    }


def search_page(results, after: Optional[str] = None) -> Dict[str, Any]:
    """검색 API 응답 한 페이지를 만듭니다."""
    page: Dict[str, Any] = {"results": list(results)}
    if after is not None:
        page["paging"] = {"next": {"after": after}}
    return page
