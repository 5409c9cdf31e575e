"""
Domain 패키지

도메인 엔티티, 값 객체, 비즈니스 규칙을 정의합니다.
외부 의존성 없이 순수한 비즈니스 로직만 포함합니다.

주요 엔티티:
- Account: HubSpot 계정과 엔티티 종류별 워터마크
- SyncWindow: 한 번의 증분 동기화 구간과 커서 상태
- RawRecord: 검색 API가 반환한 레코드
- OutputEvent: 분석 시스템으로 전송되는 이벤트
- SyncResult: 엔티티 종류별 동기화 결과
"""
