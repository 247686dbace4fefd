import textwrap
from pathlib import Path

import pytest


@pytest.fixture
def write_file(tmp_path):
    """Write a dedented Python source file under tmp_path and return its path."""

    def _write(relative: str, source: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source))
        return path

    return _write


@pytest.fixture
def sample_suite(write_file):
    """Three passing tests: two methods on a class and one module function."""
    write_file(
        "suite/test_sample.py",
        """
        class LoginTest:
            def before_each(self, ctx):
                self.user = "alice"

            def test_login(self, ctx):
                assert self.user == "alice"

            def test_logout(self, ctx):
                assert True


        def test_ping():
            assert 1 + 1 == 2
        """,
    )
    return write_file("suite/__init__.py", "").parent
