import logging

import pytest


@pytest.fixture
def settings(monkeypatch):
    from ..config import get_settings

    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


def test_defaults(settings):
    from ..config import get_settings

    target = get_settings()
    assert target.default_format == "json"
    assert target.query_parser == "nested"
    assert target.timeout is None
    assert target.include_format_in_path is True
    assert get_settings() is target


def test_environment(settings):
    from ..base import Resource
    from ..config import get_settings

    settings.setenv("REMOTE_RESOURCE_DEFAULT_FORMAT", "xml")
    settings.setenv("REMOTE_RESOURCE_TIMEOUT", "2.5")
    settings.setenv("REMOTE_RESOURCE_INCLUDE_FORMAT_IN_PATH", "false")

    class Widget(Resource):
        class Meta:
            site = "http://api.example.com"

    assert get_settings().timeout == 2.5
    assert Widget.get_format().extension == "xml"
    assert Widget.get_connection().timeout == 2.5
    assert Widget.element_path(1) == "/widgets/1"


def test_configure_logging():
    from ..config import configure_logging

    logger = configure_logging("DEBUG")
    try:
        assert logger.name == "remote_resource"
        assert logger.level == logging.DEBUG
        handlers = list(logger.handlers)
        configure_logging()
        assert logger.handlers == handlers
    finally:
        for handler in list(logger.handlers):
            if getattr(handler, "_remote_resource", False):
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
