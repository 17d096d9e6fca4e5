import pytest

from nws_placefile.domain.models import AlertProperties
from nws_placefile.domain.styling import (
    DEFAULT_COLOR,
    PDS_COLOR,
    TORNADO_EMERGENCY_COLOR,
    style_alert,
)


def make_props(**overrides) -> AlertProperties:
    values = {
        "event": "Tornado Warning",
        "certainty": "Observed",
        "headline": "Tornado Warning issued",
        "description": "A confirmed tornado was located near town.",
    }
    values.update(overrides)
    return AlertProperties(**values)


@pytest.mark.parametrize(
    "event,color",
    [
        ("Tornado Warning", (255, 0, 0)),
        ("Severe Thunderstorm Warning", (255, 255, 0)),
        ("Flood Warning", (0, 255, 0)),
        ("Special Weather Statement", (255, 255, 204)),
        ("Winter Storm Warning", DEFAULT_COLOR),
    ],
)
def test_base_color_from_event(event, color):
    style = style_alert(make_props(event=event, description="Nothing special."))
    assert style.color == color


def test_confirmed_tornado_widens_line():
    assert style_alert(make_props()).width == 8


@pytest.mark.parametrize(
    "overrides",
    [
        {"event": "Severe Thunderstorm Warning"},
        {"certainty": "Likely"},
        {"description": "A radar indicated tornado was located near town."},
        {"description": "A CONFIRMED TORNADO was located near town."},
    ],
)
def test_width_stays_base_when_any_condition_fails(overrides):
    assert style_alert(make_props(**overrides)).width == 4


def test_pds_wording_overrides_color_case_insensitively():
    style = style_alert(make_props(description="This is a PARTICULARLY DANGEROUS SITUATION."))
    assert style.color == PDS_COLOR
    style = style_alert(make_props(description="A large and extremely dangerous tornado."))
    assert style.color == PDS_COLOR


def test_tornado_emergency_overrides_color():
    style = style_alert(make_props(description="TORNADO EMERGENCY for the city."))
    assert style.color == TORNADO_EMERGENCY_COLOR


def test_tornado_emergency_is_case_sensitive():
    style = style_alert(make_props(description="tornado emergency for the city."))
    assert style.color == (255, 0, 0)


def test_pds_beats_tornado_emergency():
    style = style_alert(
        make_props(description="TORNADO EMERGENCY. This is a particularly dangerous situation.")
    )
    assert style.color == PDS_COLOR


def test_hover_text_joins_headline_and_description():
    style = style_alert(make_props(headline="Head", description="TORNADO EMERGENCY now"))
    assert style.hover_text == "Head\n\nTORNADO EMERGENCY now"
