import pytest
from dentalchart.errors import InvalidToothError
from dentalchart.teeth import (
    ALL_TEETH,
    PERMANENT_TEETH,
    PRIMARY_TEETH,
    ToothType,
    classify,
    get_quadrant,
    get_tooth_type,
    is_valid_tooth,
    parse_tooth,
)


class TestToothSets:
    def test_permanent_count(self):
        assert len(PERMANENT_TEETH) == 32

    def test_primary_count(self):
        assert len(PRIMARY_TEETH) == 20

    def test_all_teeth_is_union(self):
        assert ALL_TEETH == set(PERMANENT_TEETH) | set(PRIMARY_TEETH)

    def test_gaps_are_invalid(self):
        for tooth in (0, 10, 19, 20, 29, 49, 50, 56, 66, 76, 86, 99):
            assert not is_valid_tooth(tooth)

    def test_non_integers_are_invalid(self):
        assert not is_valid_tooth("17")
        assert not is_valid_tooth(17.0)
        assert not is_valid_tooth(None)
        assert not is_valid_tooth(True)


class TestClassify:
    def test_upper_right_molar(self):
        tooth = classify(17)
        assert tooth.quadrant == 1
        assert tooth.type == ToothType.MOLAR
        assert tooth.is_molar
        assert tooth.is_upper
        assert not tooth.is_primary

    def test_premolars(self):
        for tooth in (14, 15, 24, 25, 34, 35, 44, 45):
            assert get_tooth_type(tooth) == ToothType.PREMOLAR

    def test_anteriors(self):
        for tooth in (11, 12, 13, 21, 22, 23, 31, 32, 33, 41, 42, 43):
            assert get_tooth_type(tooth) == ToothType.ANTERIOR

    def test_molars(self):
        for tooth in (16, 17, 18, 26, 27, 28, 36, 37, 38, 46, 47, 48):
            assert get_tooth_type(tooth) == ToothType.MOLAR

    def test_lower_jaw_is_not_upper(self):
        assert not classify(36).is_upper
        assert not classify(46).is_upper

    def test_primary_quadrants_map_to_permanent(self):
        assert get_quadrant(51) == 1
        assert get_quadrant(61) == 2
        assert get_quadrant(71) == 3
        assert get_quadrant(81) == 4

    def test_primary_types_follow_position(self):
        assert get_tooth_type(53) == ToothType.ANTERIOR
        assert get_tooth_type(54) == ToothType.PREMOLAR
        assert get_tooth_type(85) == ToothType.PREMOLAR
        assert classify(85).is_primary

    def test_invalid_tooth_raises(self):
        with pytest.raises(InvalidToothError) as exc_info:
            classify(19)
        assert "19" in exc_info.value.message


class TestParseTooth:
    def test_accepts_strings(self):
        assert parse_tooth(" 26 ") == 26

    def test_rejects_garbage(self):
        with pytest.raises(InvalidToothError):
            parse_tooth("abc")

    def test_rejects_out_of_range(self):
        with pytest.raises(InvalidToothError):
            parse_tooth("59")
