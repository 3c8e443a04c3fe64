import sys
from pathlib import Path
import pytest

# Add project src/ to sys.path for src-layout imports
_SRC = Path(__file__).resolve().parents[1] / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from helpers import mark_by_dir


TESTS = Path(__file__).parent

def pytest_collection_modifyitems(config, items):
    # Mark tests by directory structure
    mark_by_dir(items, TESTS / "vibecheckr" / "core", pytest.mark.unit)
    mark_by_dir(items, TESTS / "vibecheckr" / "infra", pytest.mark.integration)
    mark_by_dir(items, TESTS / "vibecheckr" / "app", pytest.mark.e2e)
    mark_by_dir(items, TESTS / "vibecheckr" / "shared", pytest.mark.unit)
