import os

import pytest


@pytest.fixture(autouse=True)
def _clean_uwallet_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("UWALLET_"):
            monkeypatch.delenv(name, raising=False)
