from __future__ import annotations

from typing import Any, ClassVar, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .rules import FogCategory, LightColour, LightPhase, PowerType, Shape, StructureType
from .validity import is_valid


# --- Decoded notation records ---


class NotationRecord(BaseModel):
    """Shared shape of a decoded cell: optional fields plus a derived validity flag."""

    model_config = ConfigDict(frozen=True)

    kind: ClassVar[str] = ""

    raw: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return is_valid(self)


class LightCharacteristic(NotationRecord):
    kind: ClassVar[str] = "light"

    multiplicity: Optional[int] = None
    phase: Optional[LightPhase] = None
    group: Optional[str] = None
    additional: Optional[LightPhase] = None
    colours: Tuple[LightColour, ...] = ()
    period: Optional[float] = Field(default=None, description="Period in seconds")


class FogSignalCharacteristic(NotationRecord):
    kind: ClassVar[str] = "fog_signal"

    category: Optional[FogCategory] = None
    morse: Optional[str] = None
    group: Optional[int] = None
    period: Optional[float] = Field(default=None, description="Period in seconds")
    sequence: Optional[str] = Field(default=None, description="Timing breakdown, kept verbatim")


class DesignCode(NotationRecord):
    kind: ClassVar[str] = "design_code"

    gla_type: Optional[str] = None
    power: Optional[PowerType] = None
    range: Optional[float] = Field(default=None, description="Nominal range in nautical miles")
    unlit: bool = False
    structure_type: Optional[StructureType] = None
    shape: Optional[Shape] = None
    aids: FrozenSet[str] = frozenset()

    @property
    def effective_shape(self) -> Optional[Shape]:
        """The written shape, or the conventional one for the structure type."""
        if self.shape is not None:
            return self.shape
        if self.structure_type is not None:
            return self.structure_type.default_shape
        return None


# --- API envelopes ---


class TagPair(BaseModel):
    k: str
    v: str


class DecodeRequest(BaseModel):
    value: Optional[str] = Field(default=None, examples=["Fl(2+1)W.10s"])


class LightDecodeResponse(BaseModel):
    record: LightCharacteristic
    tags: List[TagPair] = Field(default_factory=list)


class FogSignalDecodeResponse(BaseModel):
    record: FogSignalCharacteristic
    tags: List[TagPair] = Field(default_factory=list)


class DesignCodeDecodeResponse(BaseModel):
    record: DesignCode
    tags: List[TagPair] = Field(default_factory=list)


class AtonNode(BaseModel):
    uid: str
    name: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    changeset: int = -1
    tags: Dict[str, str] = Field(default_factory=dict)
    children: List["AtonNode"] = Field(default_factory=list)

    @property
    def seamark_type(self) -> Optional[str]:
        return self.tags.get("seamark:type")

    def update_tags(self, *tags: Any) -> None:
        """
        Update the node with tags given in k, v, k, v, ... order.

        Any "${type}" in a key is replaced by the seamark:type value, taken
        from these tags first and from the node otherwise. Blank keys or values
        are skipped.
        """
        if len(tags) % 2 != 0:
            raise ValueError(f"Invalid number of key-value tag parameters {len(tags)}")

        lookup: Dict[str, str] = {}
        for k, v in zip(tags[0::2], tags[1::2]):
            key = str(k).strip() if k is not None else ""
            val = str(v).strip() if v is not None else ""
            if key and val:
                lookup[key] = val

        seamark_type = lookup.get("seamark:type") or self.seamark_type
        if not seamark_type:
            raise ValueError(f"No seamark:type defined for AtoN {self.uid}")

        for key, val in lookup.items():
            self.tags[key.replace("${type}", seamark_type)] = val


AtonNode.model_rebuild()


class ReportSummary(BaseModel):
    rows: Optional[int] = Field(default=None, examples=[None])
    atons: int = 0
    flagged: int = 0
    warnings: int = 0
    errors: int = 0
    changeset: Optional[int] = None
    vocabulary_version: Optional[str] = None


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str


class ImportReport(BaseModel):
    summary: ReportSummary
    normalizations: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[ReportItem] = Field(default_factory=list)
    errors: List[ReportItem] = Field(default_factory=list)


class ImportResponse(BaseModel):
    atons: List[AtonNode] = Field(default_factory=list)
    report: ImportReport


class HealthResponse(BaseModel):
    ok: bool = True
    vocabulary_version: Optional[str] = None
