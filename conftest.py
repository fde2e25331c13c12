"""Root-level conftest.py: keep tests away from the user's real config.

Points PIPEWATCH_HOME at a throwaway directory and clears the credential
environment variables so no test reads ~/.pipewatch or a developer's PAT.
Being at the repo root also puts the root on sys.path, so test modules can
import shared helpers as ``tests.helpers``.
"""

import pytest


@pytest.fixture(autouse=True)
def isolated_pipewatch_home(tmp_path, monkeypatch):
    home = tmp_path / ".pipewatch"
    monkeypatch.setenv("PIPEWATCH_HOME", str(home))
    for var in (
        "PIPEWATCH_CONFIG",
        "PIPEWATCH_ORGANIZATION",
        "PIPEWATCH_PROJECT",
        "PIPEWATCH_PAT",
    ):
        monkeypatch.delenv(var, raising=False)
    yield home
