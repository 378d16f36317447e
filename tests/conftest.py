import os
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'gitvendor' and tests/ importable for helpers
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from gitvendor.core.stdlib_logging import reset_stdlib_logging_for_tests
from gitvendor.data import clear_caches
from helpers.cascade import FakeExecutor, FakePuller, FakeReviewCli, write_vendor_yml
from helpers.git import TestGitRepo


@pytest.fixture(autouse=True)
def _isolate_gitvendor_env(monkeypatch):
    """Drop developer GITVENDOR_* overrides so defaults are deterministic."""
    for key in list(os.environ):
        if key.startswith("GITVENDOR_"):
            monkeypatch.delenv(key, raising=False)
    clear_caches()
    yield
    clear_caches()
    reset_stdlib_logging_for_tests()


@pytest.fixture
def sibling_root(tmp_path: Path) -> Path:
    """Empty directory that plays the role of the cascade root."""
    root = tmp_path / "workspace"
    root.mkdir()
    return root


@pytest.fixture
def make_sibling(sibling_root: Path):
    """Factory creating ``<root>/<name>/.git-vendor/vendor.yml``."""

    def _make(name: str, content: str = "vendors: []\n") -> Path:
        return write_vendor_yml(sibling_root / name, content)

    return _make


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def fake_puller() -> FakePuller:
    return FakePuller()


@pytest.fixture
def fake_review_cli() -> FakeReviewCli:
    return FakeReviewCli()


@pytest.fixture
def git_repo(tmp_path: Path) -> TestGitRepo:
    """Isolated git repository with an initial commit on ``main``."""
    return TestGitRepo(tmp_path / "repo")
