import pytest

from aton_notation.aton import (
    AtonType,
    build_aton,
    find_aton_type,
    generate_uid,
    parse_aids_types,
    parse_lat_lon,
)
from aton_notation.design import decode_design_code
from aton_notation.errors import RowRejected
from aton_notation.fog import decode_fog_signal
from aton_notation.light import decode_light
from aton_notation.models import AtonNode


def test_find_aton_type():
    assert find_aton_type("Buoy") == AtonType.BUOY
    assert find_aton_type("Light Vessel") == AtonType.LIGHT_VESSEL
    assert find_aton_type("Light") == AtonType.LIGHTHOUSE
    assert find_aton_type("Light (sector)") == AtonType.LIGHTHOUSE
    assert find_aton_type("AIS") == AtonType.VIRTUAL_ATON
    assert find_aton_type("AIS", fold=False) == AtonType.AIS
    assert find_aton_type("Lightship") is None
    assert find_aton_type(None) is None


def test_parse_aids_types():
    assert parse_aids_types("AIS/Racon") == {AtonType.AIS, AtonType.RACON}
    assert parse_aids_types("DGPS/Semaphore") == {AtonType.DGPS}
    assert parse_aids_types("") == set()


def test_parse_lat_lon():
    assert parse_lat_lon("52°01.5'N") == pytest.approx(52.025)
    assert parse_lat_lon("001° 30.0' W") == pytest.approx(-1.5)
    assert parse_lat_lon("50,5") == pytest.approx(50.5)
    assert parse_lat_lon("-1.25") == pytest.approx(-1.25)
    assert parse_lat_lon("somewhere") is None
    assert parse_lat_lon("") is None


def test_generate_uid():
    assert generate_uid("  South Rock  Buoy ") == "south-rock-buoy"


def test_update_tags_substitutes_type():
    node = AtonNode(uid="a", name="A")
    node.update_tags("seamark:type", "light_vessel", "seamark:${type}:colour", "red", "blank", " ")
    assert node.tags == {"seamark:type": "light_vessel", "seamark:light_vessel:colour": "red"}

    node.update_tags("seamark:${type}:colour_pattern", "vertical")
    assert node.tags["seamark:light_vessel:colour_pattern"] == "vertical"


def test_update_tags_errors():
    node = AtonNode(uid="a", name="A")
    with pytest.raises(ValueError):
        node.update_tags("seamark:type")
    with pytest.raises(ValueError):
        node.update_tags("seamark:status", "permanent")


def test_cardinal_buoy_with_light():
    row = {
        "Name": "Kentish Knock",
        "Type": "Buoy",
        "Latitude": "51°38.5'N",
        "Longitude": "001°40.2'E",
        "Character": "Q(3)10s",
        "TH Design Code": "2S5EC/B",
        "Comment": "Moved 2019",
    }
    aton = build_aton(row, 3, light=decode_light(row["Character"]), design_code=decode_design_code("2S5EC/B"))

    assert aton.uid == "kentish-knock"
    assert aton.changeset == 3
    assert aton.lat == pytest.approx(51 + 38.5 / 60)
    assert aton.tags["seamark:name"] == "Kentish Knock"
    assert aton.tags["seamark:type"] == "buoy_cardinal"
    assert aton.tags["seamark:buoy_cardinal:category"] == "east"
    assert aton.tags["seamark:buoy_cardinal:shape"] == "pillar"
    assert aton.tags["seamark:buoy_cardinal:colour"] == "black;yellow;black"
    assert aton.tags["seamark:buoy_cardinal:colour_pattern"] == "stripes"
    assert aton.tags["seamark:design_code:type"] == "EC"
    assert aton.tags["seamark:design_code:aids"] == "B"
    assert aton.tags["seamark:status"] == "permanent"
    assert aton.tags["seamark:information"] == "Moved 2019"

    assert [c.uid for c in aton.children] == ["kentish-knock-light"]
    light = aton.children[0]
    assert light.tags["seamark:type"] == "light"
    assert light.tags["seamark:light:character"] == "Q"
    assert light.tags["seamark:light:group"] == "3"
    assert light.tags["seamark:light:period"] == "10"
    assert light.lat == aton.lat


def test_single_colour_has_no_pattern():
    row = {"Name": "Gull", "Type": "Beacon", "TH Design Code": "1S3SL"}
    aton = build_aton(row, 1, design_code=decode_design_code(row["TH Design Code"]))
    assert aton.tags["seamark:type"] == "beacon_lateral"
    assert aton.tags["seamark:beacon_lateral:colour"] == "green"
    assert "seamark:beacon_lateral:colour_pattern" not in aton.tags


def test_lighthouse_with_equipment():
    row = {
        "Name": "Needles",
        "Type": "Lighthouse",
        "Character": "Oc(2)WRG.20s",
        "Range": "17",
        "HWS": "HORN(2)30s",
        "Radio Aids": "AIS/Racon",
        "MMSI": "992351234",
    }
    aton = build_aton(
        row, 1, light=decode_light(row["Character"]), fog_signal=decode_fog_signal(row["HWS"])
    )

    assert aton.tags["seamark:type"] == "light_major"
    assert [c.uid for c in aton.children] == [
        "needles-light", "needles-ais", "needles-racon", "needles-fog-signal",
    ]
    children = {c.uid: c.tags for c in aton.children}
    assert children["needles-light"]["seamark:light:colour"] == "white;red;green"
    assert children["needles-light"]["seamark:light:range"] == "17"
    assert children["needles-light"]["seamark:light:visibility"] == "high intensity"
    assert children["needles-ais"]["seamark:radio_station:category"] == "ais"
    assert children["needles-ais"]["seamark:radio_station:mmsi"] == "992351234"
    assert children["needles-racon"]["seamark:type"] == "radar_transponder"
    assert children["needles-fog-signal"]["seamark:fog_signal:category"] == "horn"
    assert children["needles-fog-signal"]["seamark:fog_signal:group"] == "2"


def test_invalid_light_adds_no_light_tags():
    row = {"Name": "Odd", "Type": "Light", "Character": "???"}
    aton = build_aton(row, 1, light=decode_light("???"))
    light = aton.children[0]
    assert light.tags["seamark:type"] == "light"
    assert not any(k.startswith("seamark:light:character") for k in light.tags)


def test_virtual_aton():
    row = {"Name": "Goodwin East", "Type": "AIS", "MMSI": "992351001"}
    aton = build_aton(row, 1)
    assert aton.tags["seamark:type"] == "radio_station"
    assert aton.tags["seamark:virtual_aton:category"] == "special_purpose"
    assert aton.children == []


@pytest.mark.parametrize("design_code", [None, "", "junk", "2S5"])
def test_buoy_needs_a_design_code(design_code):
    row = {"Name": "Lost", "Type": "Buoy", "TH Design Code": design_code}
    record = decode_design_code(design_code) if design_code is not None else None
    with pytest.raises(RowRejected) as e:
        build_aton(row, 1, design_code=record)
    assert e.value.issue == "invalid_design_code"
    assert e.value.column == "TH Design Code"


def test_rejected_rows():
    with pytest.raises(RowRejected) as e:
        build_aton({"Name": " ", "Type": "Buoy"}, 1)
    assert e.value.issue == "missing_name"

    with pytest.raises(RowRejected) as e:
        build_aton({"Name": "Thing", "Type": "Windmill"}, 1)
    assert e.value.issue == "unknown_type"
    assert e.value.value == "Windmill"
