from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


PartCategory = Literal[
    "cpu",
    "motherboard",
    "ram",
    "gpu",
    "storage",
    "psu",
    "case",
    "cooler",
]

CATEGORIES: Tuple[PartCategory, ...] = (
    "cpu",
    "motherboard",
    "ram",
    "gpu",
    "storage",
    "psu",
    "case",
    "cooler",
)

CATEGORY_LABELS: Dict[str, str] = {
    "cpu": "Processor",
    "motherboard": "Motherboard",
    "ram": "Memory",
    "gpu": "Graphics Card",
    "storage": "Storage",
    "psu": "Power Supply",
    "case": "Case",
    "cooler": "CPU Cooler",
}

Severity = Literal["error", "warning", "ok"]
CompatStatus = Literal["free", "ok", "warn", "incompat"]
SlotState = Literal["", "selected", "warn", "error"]

# ints stay ints so messages read "105W", not "105.0W"
Number = Union[int, float]


class CatalogModel(BaseModel):
    # catalog JSON is camelCase, python side is snake_case
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Part(CatalogModel):
    id: str
    name: str
    category: PartCategory
    brand: str = ""
    price: Number = 0

    # compatibility parameters
    socket: str = ""
    tdp: Number = 0
    ram_type: str = ""
    form_factor: str = ""
    type: str = ""
    # capacities have no safe default; a missing one skips its rule
    wattage: Optional[Number] = None
    tdp_capacity: Optional[Number] = None

    # presentation only
    cores: int = 0
    threads: int = 0
    base: Number = 0
    boost: Number = 0
    vram: int = 0
    base_clock: int = 0
    boost_clock: int = 0
    speed: int = 0
    capacity: Union[int, str] = 0
    read: int = 0
    write: int = 0
    iface: str = ""
    efficiency: str = ""
    modular: str = ""
    color: str = ""

    @property
    def title(self) -> str:
        return f"{self.brand} {self.name}".strip()


class Build(CatalogModel):
    cpu: Optional[Part] = None
    motherboard: Optional[Part] = None
    ram: Optional[Part] = None
    gpu: Optional[Part] = None
    storage: Optional[Part] = None
    psu: Optional[Part] = None
    case: Optional[Part] = None
    cooler: Optional[Part] = None

    @model_validator(mode="after")
    def _check_slots(self) -> "Build":
        for category in CATEGORIES:
            part = getattr(self, category)
            if part is not None and part.category != category:
                raise ValueError(
                    f"{part.category} part {part.id!r} cannot occupy the {category} slot"
                )
        return self

    def get(self, category: str) -> Optional[Part]:
        if category not in CATEGORIES:
            return None
        return getattr(self, category)

    def selected(self) -> Dict[str, Part]:
        """Filled slots in builder order."""
        return {
            category: getattr(self, category)
            for category in CATEGORIES
            if getattr(self, category) is not None
        }

    def is_empty(self) -> bool:
        return not self.selected()

    def overlay(self, category: str, part: Optional[Part]) -> "Build":
        """Return a new build with one slot replaced; ``None`` empties it."""
        if category not in CATEGORIES:
            raise ValueError(f"unknown category: {category}")
        slots = {key: getattr(self, key) for key in CATEGORIES}
        slots[category] = part
        return Build(**slots)

    def cleared(self) -> "Build":
        return Build()

    def total_price(self) -> Number:
        return sum(part.price for part in self.selected().values())

    def part_ids(self) -> Dict[str, str]:
        return {category: part.id for category, part in self.selected().items()}


class Issue(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    rule: str = ""


@dataclass(frozen=True)
class PowerBudget:
    """
    Estimated system draw in watts.

    ``system_overhead`` is a fixed allowance for motherboard, memory,
    storage and fans; it never depends on the selected parts.
    """
    cpu_draw: Number
    gpu_draw: Number
    system_overhead: Number

    @property
    def total(self) -> Number:
        return self.cpu_draw + self.gpu_draw + self.system_overhead

    def to_dict(self) -> Dict[str, Number]:
        return {
            "cpuDraw": self.cpu_draw,
            "gpuDraw": self.gpu_draw,
            "systemOverhead": self.system_overhead,
            "total": self.total,
        }


class CandidateStatus(ApiModel):
    part: Part
    compat: CompatStatus


class BuildSummary(ApiModel):
    build: Build
    issues: List[Issue] = Field(default_factory=list)
    power: Dict[str, Number] = Field(default_factory=dict)
    psu_load_percent: int = 0
    total_price: Number = 0
    slot_states: Dict[str, SlotState] = Field(default_factory=dict)
    free_mode: bool = False


class SelectRequest(ApiModel):
    part_id: str


class FreeModeRequest(ApiModel):
    enabled: bool


class LoadRequest(ApiModel):
    build: str


class CheckRequest(ApiModel):
    parts: Dict[PartCategory, str] = Field(default_factory=dict)
