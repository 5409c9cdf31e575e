"""
SQLAlchemy 데이터베이스 모델

HubSpot 계정 엔티티와 매핑되는 테이블 모델을 정의합니다.
토큰은 암호화된 문자열로, 워터마크는 ISO 문자열 JSON으로 저장합니다.
"""

from sqlalchemy import BigInteger, Column, DateTime, JSON, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class HubspotAccountModel(Base):
    """HubSpot 계정 테이블 모델"""

    __tablename__ = "hubspot_accounts"

    hub_id = Column(BigInteger, primary_key=True, autoincrement=False)
    access_token = Column(Text, nullable=False, default="")  # 암호화된 값
    refresh_token = Column(Text, nullable=False)  # 암호화된 값
    expires_at = Column(DateTime(timezone=True))
    # {"companies": "2024-01-01T00:00:00+00:00", ...}
    last_pulled_dates = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
