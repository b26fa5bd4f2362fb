from itertools import count
from pathlib import Path

import pytest

from pcforge.db import PartsRepository
from pcforge.schemas import Build, Part


ROOT = Path(__file__).resolve().parents[1]

_ids = count(1)


@pytest.fixture
def make_part():
    def _make(category: str, **fields) -> Part:
        fields.setdefault("id", f"{category}-{next(_ids)}")
        fields.setdefault("name", f"Test {category}")
        fields.setdefault("brand", "Generic")
        return Part(category=category, **fields)

    return _make


@pytest.fixture
def scenario_a(make_part) -> Build:
    return Build(
        cpu=make_part("cpu", socket="AM5", tdp=105),
        motherboard=make_part("motherboard", socket="AM5", ram_type="DDR5", form_factor="ATX"),
        cooler=make_part("cooler", tdp_capacity=130),
        ram=make_part("ram", type="DDR5"),
        psu=make_part("psu", wattage=650),
        case=make_part("case", form_factor="ATX"),
    )


@pytest.fixture
def repo() -> PartsRepository:
    return PartsRepository(ROOT / "data" / "parts.json")
