import pytest

from vibecheckr.app.config import AppConfig, DirectoryConfig, LLMConfig, LoggingConfig, ScannerConfig


@pytest.fixture
def test_config(tmp_path):
    """Config isolated under tmp_path: no scanners, no API key."""
    return AppConfig(
        directories=DirectoryConfig(home=tmp_path / "home"),
        llm=LLMConfig(api_key=None),
        scanners=ScannerConfig(enabled=[]),
        logging=LoggingConfig(logger_name="vibecheckr.test"),
    )
