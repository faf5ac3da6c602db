import logging
import sys

import pytest

from .repo_root import REPO_ROOT

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture(autouse=True)
def _reset_imgrights_logging():
    """Undo configure_logging() so caplog keeps seeing records between tests."""
    yield
    root = logging.getLogger("imgrights")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture(autouse=True)
def _reset_shared_exiftool():
    from imgrights import deps

    deps.reset_exiftool()
    yield
    deps.reset_exiftool()
