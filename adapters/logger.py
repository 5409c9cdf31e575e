"""
로거 어댑터

Core 레이어의 LoggerPort를 구현하는 Python 표준 로깅 어댑터입니다.
키워드 인자(hub_id, operation, entity_kind 등)는 컨텍스트로 함께 기록됩니다.
"""

import logging
import sys
from typing import Any, Dict

from core.domain.ports import LoggerPort

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LoggerAdapter(LoggerPort):
    """Python 표준 로깅을 사용하는 로거 어댑터"""

    def __init__(self, name: str = "crmsync", level: str = "INFO", format_string: str = DEFAULT_FORMAT):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))

        # 핸들러가 없으면 콘솔 핸들러 추가
        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter(format_string))
            self.logger.addHandler(handler)

    @staticmethod
    def _with_context(message: str, context: Dict[str, Any]) -> str:
        if not context:
            return message
        details = ", ".join(f"{key}={value}" for key, value in context.items() if value is not None)
        return f"{message} [{details}]" if details else message

    def info(self, message: str, **kwargs) -> None:
        """정보 로그"""
        self.logger.info(self._with_context(message, kwargs), extra=kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """경고 로그"""
        self.logger.warning(self._with_context(message, kwargs), extra=kwargs)

    def error(self, message: str, **kwargs) -> None:
        """오류 로그"""
        self.logger.error(self._with_context(message, kwargs), extra=kwargs)

    def debug(self, message: str, **kwargs) -> None:
        """디버그 로그"""
        self.logger.debug(self._with_context(message, kwargs), extra=kwargs)


def create_logger(name: str = "crmsync", level: str = "INFO", format_string: str = DEFAULT_FORMAT) -> LoggerPort:
    """로거 인스턴스를 생성합니다."""
    return LoggerAdapter(name, level, format_string)
