# tests/conftest.py
from pathlib import Path

import pytest

from docgate.config import Settings
from docgate.di import build_container


@pytest.fixture
def sandbox(tmp_path: Path):
    """Synthetic home + shared tmp, plus an outside folder that must stay unreachable."""
    home = tmp_path / "home"
    shared = tmp_path / "shared-tmp"
    outside = tmp_path / "outside"
    for d in (home, shared, outside):
        d.mkdir()
    settings = Settings(HOME_DIR=home, SHARED_TMP_DIR=shared, _env_file=None)
    return {
        "home": home.resolve(),
        "tmp": shared.resolve(),
        "outside": outside.resolve(),
        "settings": settings,
    }


@pytest.fixture
def container(sandbox):
    return build_container(sandbox["settings"])


@pytest.fixture
def guard(container):
    return container.guard


@pytest.fixture
def fs(container):
    return container.fs_service
