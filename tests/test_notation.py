from dentalchart.codes import FillingMaterial
from dentalchart.notation import (
    NotationKind,
    check_direct_code,
    check_material_pattern,
    check_tooth_specific_pattern,
    parse_all_fillings,
    parse_filling_notation,
    parse_notation,
)
from dentalchart.surfaces import MainSurface


class TestParseFillingNotation:
    def test_17dob(self):
        result = parse_filling_notation("17dob")
        assert result.tooth == 17
        assert set(result.surfaces) == {MainSurface.DISTAL, MainSurface.OCCLUSAL, MainSurface.BUCCAL}
        assert result.surface_count == 3

    def test_case_insensitive(self):
        result = parse_filling_notation("17DOB")
        assert result.tooth == 17
        assert result.surface_count == 3

    def test_q2_molar_letters_are_mirrored(self):
        result = parse_filling_notation("27b")
        assert result.surfaces == (MainSurface.LINGUAL,)

    def test_duplicate_letters_count_once(self):
        result = parse_filling_notation("11oi")
        assert result.surfaces == (MainSurface.OCCLUSAL,)
        assert result.surface_count == 1

    def test_invalid_tooth_returns_none(self):
        assert parse_filling_notation("19o") is None
        assert parse_filling_notation("99dob") is None

    def test_garbage_returns_none(self):
        assert parse_filling_notation("") is None
        assert parse_filling_notation("dob") is None
        assert parse_filling_notation("17x") is None
        assert parse_filling_notation("17 dob") is None


class TestToothSpecificPattern:
    def test_material_only(self):
        result = check_tooth_specific_pattern("18v9")
        assert result.tooth == 18
        assert result.material == FillingMaterial.COMPOSITE
        assert result.surface_count is None

    def test_material_and_count(self):
        result = check_tooth_specific_pattern("36v82")
        assert result.material == FillingMaterial.GLASIONOMEER
        assert result.surface_count == 2

    def test_amalgam(self):
        assert check_tooth_specific_pattern("46v7").material == FillingMaterial.AMALGAM

    def test_invalid(self):
        assert check_tooth_specific_pattern("18v6") is None
        assert check_tooth_specific_pattern("19v9") is None
        assert check_tooth_specific_pattern("18v95") is None


class TestMaterialAndCodePatterns:
    def test_material_shorthand(self):
        result = check_material_pattern("v93")
        assert result.material == FillingMaterial.COMPOSITE
        assert result.surface_count == 3

    def test_material_shorthand_rejects_tooth(self):
        assert check_material_pattern("17v9") is None

    def test_direct_code_upper_cases(self):
        assert check_direct_code("h11") == "H11"
        assert check_direct_code("A10") == "A10"

    def test_direct_code_rejects_words(self):
        assert check_direct_code("crown") is None
        assert check_direct_code("C022a") is None


class TestParseAllFillings:
    def test_splits_on_spaces_and_commas(self):
        result = parse_all_fillings("17dob, 26m 36o")
        assert [f.tooth for f in result] == [17, 26, 36]

    def test_drops_non_matches(self):
        result = parse_all_fillings("17dob foo 99o 21m")
        assert [f.tooth for f in result] == [17, 21]

    def test_empty(self):
        assert parse_all_fillings("") == []


class TestParseNotation:
    def test_filling(self):
        intent = parse_notation("14dob")
        assert intent.kind == NotationKind.FILLING
        assert intent.filling.tooth == 14
        assert len(intent.fillings) == 1

    def test_tooth_material(self):
        intent = parse_notation("18v9")
        assert intent.kind == NotationKind.TOOTH_MATERIAL
        assert intent.tooth_material.tooth == 18

    def test_bare_material_wins_over_code(self):
        intent = parse_notation("v91")
        assert intent.kind == NotationKind.MATERIAL
        assert intent.material.surface_count == 1

    def test_direct_code(self):
        intent = parse_notation("r24")
        assert intent.kind == NotationKind.DIRECT_CODE
        assert intent.code == "R24"

    def test_multiple_fillings(self):
        intent = parse_notation("17dob 26m")
        assert intent.kind == NotationKind.FILLING
        assert intent.filling is None
        assert [f.tooth for f in intent.fillings] == [17, 26]

    def test_free_text_is_search(self):
        intent = parse_notation("kroon")
        assert intent.kind == NotationKind.SEARCH
        assert intent.text == "kroon"

    def test_never_raises_on_empty(self):
        assert parse_notation("").kind == NotationKind.SEARCH
        assert parse_notation(None).kind == NotationKind.SEARCH
