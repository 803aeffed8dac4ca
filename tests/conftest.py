import pytest

from maulog.config import Config


@pytest.fixture
def sample_error_line():
    return (
        '2024-01-15 10:30:00 [MSau04.0] <Info> ErrorsAndWarnings: '
        '{"Error":"timeout","Operation":"Download","AppID":"MSau04","ErrorCode":"-1"}'
    )


@pytest.fixture
def log_dir(tmp_path):
    d = tmp_path / "logs"
    d.mkdir()
    return d


@pytest.fixture
def config(log_dir):
    return Config(log_dir=str(log_dir), stop_timeout=2.0)
