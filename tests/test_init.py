"""Tests for the package surface."""

import logging

import structura


def test_version():
    assert isinstance(structura.__version__, str)


def test_public_names():
    for name in structura.__all__:
        assert hasattr(structura, name), name


def test_logger_level_from_settings():
    expected = logging.getLevelName(structura.settings.LOG_LEVEL.upper())
    assert structura.logger.name == "structura"
    assert structura.logger.level == expected
