"""
core/config/loader.py 테스트

settings.yaml 로드, 검증, DB 경로 결정 테스트
"""

from pathlib import Path

import pytest

from core.config.loader import (
    AppConfig,
    SettingsLoadError,
    WebConfig,
    get_db_path,
    get_settings,
    load_config,
    Settings,
)
from core.constants import Defaults, Paths, PROJECT_ROOT
from core.types import AppMode


class TestAppConfig:
    """AppConfig 데이터클래스 테스트"""

    def test_defaults(self) -> None:
        """기본값"""
        config = AppConfig(mode=AppMode.DEVELOPMENT)

        assert config.db_path_override is None
        assert config.web.host == Defaults.WEB_HOST
        assert config.web.port == Defaults.WEB_PORT
        assert config.web.cors_origins == ("*",)

    def test_frozen(self) -> None:
        """불변성 확인"""
        config = AppConfig(mode=AppMode.DEVELOPMENT)

        with pytest.raises(AttributeError):
            config.mode = AppMode.PRODUCTION  # type: ignore

    def test_web_config_frozen(self) -> None:
        web = WebConfig()

        with pytest.raises(AttributeError):
            web.port = 9000  # type: ignore


class TestLoadConfig:
    """load_config 테스트"""

    def test_load_development(self, temp_settings_file: Path, temp_dir: Path) -> None:
        """development 설정 로드"""
        config = load_config(temp_settings_file)

        assert config.mode == AppMode.DEVELOPMENT
        assert config.db_path_override == temp_dir / "test_vaultbook.db"
        assert config.web.host == "127.0.0.1"
        assert config.web.port == 8100
        assert config.web.cors_origins == ("http://localhost:5173",)

    def test_load_production(self, temp_settings_file_production: Path) -> None:
        """production 설정 로드 (cors_origins 문자열 허용)"""
        config = load_config(temp_settings_file_production)

        assert config.mode == AppMode.PRODUCTION
        assert config.db_path_override is None
        assert config.web.port == Defaults.WEB_PORT
        assert config.web.cors_origins == ("https://vaultbook.example.com",)

    def test_file_not_found(self, temp_dir: Path) -> None:
        """파일 없음"""
        with pytest.raises(SettingsLoadError, match="찾을 수 없습니다"):
            load_config(temp_dir / "nonexistent.yaml")

    def test_invalid_mode(self, temp_settings_file_invalid_mode: Path) -> None:
        """잘못된 mode"""
        with pytest.raises(ValueError, match="유효하지 않은 mode"):
            load_config(temp_settings_file_invalid_mode)

    def test_missing_mode(self, temp_dir: Path) -> None:
        """mode 필드 누락"""
        path = temp_dir / "no_mode.yaml"
        path.write_text("web:\n  port: 8000\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="mode"):
            load_config(path)

    def test_empty_file(self, temp_dir: Path) -> None:
        """빈 파일"""
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="비어 있습니다"):
            load_config(path)

    def test_invalid_yaml(self, temp_dir: Path) -> None:
        """YAML 문법 오류"""
        path = temp_dir / "broken.yaml"
        path.write_text("mode: [development\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="파싱 실패"):
            load_config(path)

    def test_invalid_port(self, temp_dir: Path) -> None:
        """숫자가 아닌 port"""
        path = temp_dir / "bad_port.yaml"
        path.write_text("mode: development\nweb:\n  port: abc\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="web.port"):
            load_config(path)

    def test_mode_case_insensitive(self, temp_dir: Path) -> None:
        """대문자 mode 허용"""
        path = temp_dir / "upper.yaml"
        path.write_text("mode: PRODUCTION\n", encoding="utf-8")

        assert load_config(path).mode == AppMode.PRODUCTION

    def test_relative_db_path(self, temp_dir: Path) -> None:
        """상대 경로는 프로젝트 루트 기준"""
        path = temp_dir / "relative.yaml"
        path.write_text("mode: development\ndatabase:\n  path: data/custom.db\n", encoding="utf-8")

        config = load_config(path)

        assert config.db_path_override == PROJECT_ROOT / "data" / "custom.db"


class TestGetDbPath:
    """get_db_path 테스트"""

    def test_production(self) -> None:
        assert get_db_path(AppConfig(mode=AppMode.PRODUCTION)) == Paths.PROD_DB

    def test_development(self) -> None:
        assert get_db_path(AppConfig(mode=AppMode.DEVELOPMENT)) == Paths.DEV_DB

    def test_override_wins(self, temp_dir: Path) -> None:
        """database.path가 모드보다 우선"""
        override = temp_dir / "x.db"
        config = AppConfig(mode=AppMode.PRODUCTION, db_path_override=override)

        assert get_db_path(config) == override


class TestSettings:
    """Settings 싱글턴 테스트"""

    def test_singleton(self, temp_settings_file: Path) -> None:
        """같은 인스턴스 반환"""
        first = get_settings(temp_settings_file)
        second = get_settings()

        assert first is second

    def test_properties(self, temp_settings_file: Path, temp_dir: Path) -> None:
        settings = get_settings(temp_settings_file)

        assert settings.mode == AppMode.DEVELOPMENT
        assert settings.db_path == temp_dir / "test_vaultbook.db"
        assert settings.web.port == 8100

    def test_reset(
        self,
        temp_settings_file: Path,
        temp_settings_file_production: Path,
    ) -> None:
        """reset 후 다른 파일로 다시 로드"""
        get_settings(temp_settings_file)
        Settings.reset()

        settings = get_settings(temp_settings_file_production)

        assert settings.mode == AppMode.PRODUCTION
        assert settings.db_path == Paths.PROD_DB
