"""
Config 패키지

동기화 설정 관리를 위한 포트/어댑터 패턴 구현
- 포트: core.domain.ports.ConfigPort
- 어댑터: Pydantic Settings 기반 환경별 설정 (development, production, testing)
"""
