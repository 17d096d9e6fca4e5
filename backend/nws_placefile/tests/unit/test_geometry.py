import math

from nws_placefile.domain.geometry import Point2D, format_number


def test_add_and_sub_mutate_in_place():
    point = Point2D(1, 2)
    result = point.add(Point2D(3, 4))
    assert result is point
    assert (point.x, point.y) == (4, 6)
    point.sub(Point2D(1, 1))
    assert (point.x, point.y) == (3, 5)


def test_to_string_uses_plain_numbers():
    assert str(Point2D(1, 2)) == "1,2"
    assert str(Point2D(35.25, -97.5)) == "35.25,-97.5"
    assert str(Point2D(35.0, -97.0)) == "35,-97"


def test_format_number_keeps_precision():
    assert format_number(0.1) == "0.1"
    assert format_number(-101.123456) == "-101.123456"


def test_length():
    assert math.isclose(Point2D(3, 4).length(), 5.0)
