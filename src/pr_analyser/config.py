"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from pathlib import Path
import logging

from .publishing.publisher import DEFAULT_TRACKING_COMMENT_TEXT


@dataclass
class BitbucketConfig:
    """Bitbucket Server API 설정"""
    base_url: str = ""
    token: Optional[str] = None
    timeout_seconds: int = 30
    max_retries: int = 0
    activities_limit: int = 500
    page_limit: int = 500


@dataclass
class AnalysisConfig:
    """분석 설정"""
    tracking_comment_text: str = DEFAULT_TRACKING_COMMENT_TEXT
    change_threshold: int = 100
    disabled_analyzers: List[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class ServerConfig:
    """서버 설정"""
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False


def _split_names(value: str) -> List[str]:
    return [name.strip() for name in value.split(',') if name.strip()]


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    bitbucket: BitbucketConfig
    analysis: AnalysisConfig
    logging: LoggingConfig
    server: ServerConfig
    debug: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        return cls(
            bitbucket=BitbucketConfig(
                base_url=os.getenv("BITBUCKET_URL", ""),
                token=os.getenv("BITBUCKET_TOKEN"),
                timeout_seconds=int(os.getenv("BITBUCKET_TIMEOUT", "30")),
                max_retries=int(os.getenv("BITBUCKET_MAX_RETRIES", "0")),
                activities_limit=int(os.getenv("ACTIVITIES_LIMIT", "500")),
                page_limit=int(os.getenv("CHANGES_PAGE_LIMIT", "500")),
            ),
            analysis=AnalysisConfig(
                tracking_comment_text=os.getenv("TRACKING_COMMENT_TEXT", DEFAULT_TRACKING_COMMENT_TEXT),
                change_threshold=int(os.getenv("CHANGE_THRESHOLD", "100")),
                disabled_analyzers=_split_names(os.getenv("DISABLED_ANALYZERS", "")),
            ),
            logging=LoggingConfig(
                level=os.getenv("LOG_LEVEL", "INFO"),
                format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
                file_path=os.getenv("LOG_FILE"),
                max_file_size=int(os.getenv("LOG_MAX_SIZE", str(10 * 1024 * 1024))),
                backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "8000")),
                debug=os.getenv("DEBUG", "false").lower() == "true",
            ),
            debug=os.getenv("DEBUG", "false").lower() == "true",
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(
            bitbucket=BitbucketConfig(**config_data.get('bitbucket', {})),
            analysis=AnalysisConfig(**config_data.get('analysis', {})),
            logging=LoggingConfig(**config_data.get('logging', {})),
            server=ServerConfig(**config_data.get('server', {})),
            debug=config_data.get('debug', False),
        )

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # Bitbucket URL 필수 확인
        if not self.bitbucket.base_url:
            errors.append("Bitbucket base URL is required")
        elif not self.bitbucket.base_url.startswith(('http://', 'https://')):
            errors.append(f"Bitbucket base URL must be http(s): {self.bitbucket.base_url}")

        if self.bitbucket.timeout_seconds <= 0:
            errors.append("Timeout must be positive")

        if self.bitbucket.max_retries < 0:
            errors.append("Max retries must be non-negative")

        if self.bitbucket.activities_limit <= 0 or self.bitbucket.page_limit <= 0:
            errors.append("Request limits must be positive")

        if not self.analysis.tracking_comment_text.strip():
            errors.append("Tracking comment text cannot be empty")

        if self.analysis.change_threshold < 0:
            errors.append("Change threshold must be non-negative")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'bitbucket': {
                'base_url': self.bitbucket.base_url,
                'timeout_seconds': self.bitbucket.timeout_seconds,
                'max_retries': self.bitbucket.max_retries,
                'activities_limit': self.bitbucket.activities_limit,
                'page_limit': self.bitbucket.page_limit,
                # 보안상 토큰은 제외
            },
            'analysis': {
                'tracking_comment_text': self.analysis.tracking_comment_text,
                'change_threshold': self.analysis.change_threshold,
                'disabled_analyzers': list(self.analysis.disabled_analyzers),
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug': self.server.debug,
            },
            'debug': self.debug,
        }


class ConfigManager:
    """설정 관리자"""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig.from_env()
        self._config.validate()
        self._setup_logging()

    @property
    def config(self) -> AppConfig:
        """현재 설정 반환"""
        return self._config

    def update_config(self, **kwargs) -> None:
        """설정 업데이트"""
        config_dict = self._config.to_dict()
        config_dict['bitbucket']['token'] = self._config.bitbucket.token

        for key, value in kwargs.items():
            if '.' in key:
                # 중첩된 설정 (예: 'analysis.change_threshold')
                section, field_name = key.split('.', 1)
                if section in config_dict:
                    config_dict[section][field_name] = value
            else:
                config_dict[key] = value

        self._config = AppConfig(
            bitbucket=BitbucketConfig(**config_dict['bitbucket']),
            analysis=AnalysisConfig(**config_dict['analysis']),
            logging=LoggingConfig(**config_dict['logging']),
            server=ServerConfig(**config_dict['server']),
            debug=config_dict['debug'],
        )

        self._config.validate()
        self._setup_logging()

    def _setup_logging(self) -> None:
        """로깅 설정"""
        logging.basicConfig(
            level=getattr(logging, self._config.logging.level.upper()),
            format=self._config.logging.format,
        )

        # 파일 로깅이 설정된 경우 로테이션 설정
        if self._config.logging.file_path:
            from logging.handlers import RotatingFileHandler

            handler = RotatingFileHandler(
                self._config.logging.file_path,
                maxBytes=self._config.logging.max_file_size,
                backupCount=self._config.logging.backup_count,
            )
            handler.setFormatter(logging.Formatter(self._config.logging.format))

            root_logger = logging.getLogger()
            root_logger.addHandler(handler)


# 전역 설정 관리자 인스턴스 (최초 사용 시 생성)
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """전역 설정 관리자 반환"""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> AppConfig:
    """현재 설정 반환"""
    return get_config_manager().config


def update_config(**kwargs) -> None:
    """설정 업데이트"""
    get_config_manager().update_config(**kwargs)
