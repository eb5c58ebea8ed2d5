import pytest

from aton_notation.design import DesignCodeDecoder, decode_design_code
from aton_notation.rules import PowerType, Shape, StructureType
from aton_notation.vocabulary import Vocabulary

# Codes seen in the Trinity House AtoN list
KNOWN_CODES = [
    "2S5NC/B", "1S7EC/RA", "2S5EC", "+1S7SC/R", "2S1SWSP/B",
    "1S10SM", "NS1SL", "1S9SC-AIS/R/MH", "3S4.5NC", "4B4SL",
]


@pytest.mark.parametrize("raw", KNOWN_CODES)
def test_known_codes_are_valid(raw):
    code = decode_design_code(raw)
    assert code.valid
    assert code.structure_type is not None


def test_cardinal_with_aid():
    code = decode_design_code("2S5NC/B")
    assert code.gla_type == "2"
    assert code.power == PowerType.SOLAR
    assert code.range == 5
    assert code.structure_type == StructureType.NORTH_CARDINAL
    assert code.shape is None
    assert code.effective_shape == Shape.PILLAR
    assert code.aids == frozenset({"B"})
    assert not code.unlit


def test_leading_plus_marks_unlit():
    code = decode_design_code("+1S7SC/R")
    assert code.unlit
    assert code.gla_type == "1"
    assert code.range == 7
    assert code.structure_type == StructureType.SOUTH_CARDINAL
    assert code.aids == frozenset({"R"})


def test_ul_power_segment_marks_unlit():
    code = decode_design_code("1ULSM")
    assert code.unlit
    assert code.power is None
    assert code.range is None
    assert code.structure_type == StructureType.SPECIAL_MARK


def test_explicit_shape():
    code = decode_design_code("2S1SWSP/B")
    assert code.structure_type == StructureType.SAFE_WATER
    assert code.shape == Shape.SPHERICAL
    assert code.effective_shape == Shape.SPHERICAL


def test_fractional_range():
    code = decode_design_code("3S4.5NC")
    assert code.range == pytest.approx(4.5)
    assert code.aids == frozenset()


def test_non_digit_gla_type_and_battery_power():
    assert decode_design_code("NS1SL").gla_type == "N"
    assert decode_design_code("4B4SL").power == PowerType.BATTERY


def test_default_shapes():
    assert decode_design_code("NS1SL").effective_shape == Shape.CONICAL
    assert decode_design_code("1S10SM").effective_shape == Shape.CAN


def test_aids_are_a_set():
    code = decode_design_code("1S9SC-AIS/R/MH")
    assert code.aids == frozenset({"AIS", "R", "MH"})
    assert decode_design_code("1S9SC-MH/R/AIS/R").aids == code.aids


def test_aid_letters_straight_after_type():
    assert decode_design_code("2S5NCB").aids == frozenset({"B"})


def test_case_and_whitespace_insensitive():
    assert decode_design_code(" 2s5nc / b ") == decode_design_code(" 2s5nc / b ")
    code = decode_design_code(" 2s5nc / b ")
    assert code.structure_type == StructureType.NORTH_CARDINAL
    assert code.aids == frozenset({"B"})
    assert code.raw == " 2s5nc / b "


@pytest.mark.parametrize("raw", ["", None, "hello", "NOTHING", "/", "-", "+", "S5NC", "99"])
def test_unrecognized_codes_are_invalid(raw):
    code = decode_design_code(raw)
    assert not code.valid
    assert code.gla_type is None


def test_suffix_aids_survive_invalid_core():
    code = decode_design_code("XX/RA")
    assert not code.valid
    assert code.aids == frozenset({"RA"})


def test_restricted_vocabulary():
    decoder = DesignCodeDecoder(Vocabulary(structure_types={"NC": StructureType.NORTH_CARDINAL}))
    code = decoder.decode("2S5NC")
    assert code.valid
    assert code.power is None
    assert code.range == 5
    assert code.structure_type == StructureType.NORTH_CARDINAL
    assert decoder.decode("2S5SC").structure_type is None
