import json
from pathlib import Path

import pytest

SAMPLE_PARAMS = Path(__file__).resolve().parent.parent / "sample_params.json"


@pytest.fixture
def sample_params_dict() -> dict:
    return json.loads(SAMPLE_PARAMS.read_text(encoding="utf-8"))
