import pytest


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """keep overrides from the developer's shell out of the tests."""
    for name in ("STRIPE_API_KEY", "STRIPE_DEVICE_NAME", "DEVPROFILE_CONFIG_FILE", "XDG_CONFIG_HOME"):
        monkeypatch.delenv(name, raising=False)
