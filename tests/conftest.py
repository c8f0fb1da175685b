import pytest

from structura import config, schema


@pytest.fixture
def strict_hooks(monkeypatch):
    """Make missing coerce_/validate_ hooks a configuration error."""
    strict = config.StructuraSettings(STRICT_HOOKS=True)
    monkeypatch.setattr(schema, "settings", strict)
    return strict
