import logging

import pytest


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path_factory):
    # keep a developer's own config file out of the tests
    monkeypatch.delenv("FNORM_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    yield
    logger = logging.getLogger("fnorm")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
