import math

import pytest
import sympy as sp
from pydantic import ValidationError

# Target the canonical constants module
from nrunits.core import constants as constants
from nrunits.core.constants import (
    CONSTANTS,
    CONSTANTS_DICT,
    SECTIONS,
    SYMBOLS,
    VALUES,
    ConstantCategory,
    ConstantInfo,
    ConstantSection,
    ConstantStatus,
)
from nrunits.core.registry import get_constants_by_section, get_constants_by_status


def test_constants_registry_is_not_empty():
    """Sanity check that the registry exists and has entries."""
    assert CONSTANTS is not None
    assert len(CONSTANTS) == 45


def test_constants_dict_no_duplicates():
    """Ensure there are no duplicate names and dict is consistent with the list."""
    names = [c.name for c in CONSTANTS]
    assert len(names) == len(set(names)), "Duplicate constant names found"
    assert list(CONSTANTS_DICT) == names
    assert list(VALUES) == names
    assert set(SYMBOLS) == set(names)


def test_every_constant_is_a_module_float():
    """Each name is a module attribute holding exactly the registry value."""
    for const in CONSTANTS:
        attr = getattr(constants, const.name)
        assert isinstance(attr, float), const.name
        assert attr == const.value
        assert const.name in constants.__all__


def test_get_constants_by_status():
    """Test the utility function for filtering constants by status."""
    derived = get_constants_by_status(ConstantStatus.DERIVED)
    primary = get_constants_by_status(ConstantStatus.PRIMARY)

    assert all(c.status == ConstantStatus.DERIVED for c in derived)
    assert all(c.eval_expr is not None for c in derived)
    assert len(derived) + len(primary) == len(CONSTANTS)
    assert "MSkm" in {c.name for c in derived}
    assert "c0" in {c.name for c in primary}


def test_sections_keep_table_grouping():
    """Sections come in table order and each named tuple mirrors its section."""
    seen = [c.section for c in CONSTANTS]
    order = list(dict.fromkeys(seen))
    assert order == list(ConstantSection)

    for section, group in SECTIONS.items():
        members = get_constants_by_section(section)
        assert group._fields == tuple(c.name for c in members)
        assert tuple(group) == tuple(c.value for c in members)

    assert SECTIONS[ConstantSection.NATURAL].c0 == 299792458.0
    assert len(SECTIONS[ConstantSection.LORENE]) == 8


def test_categories_are_assigned():
    """Conversion factors live in the gravitational-unit and EM sections."""
    conversion_sections = {
        ConstantSection.NUCLEAR,
        ConstantSection.CGS,
        ConstantSection.SI,
        ConstantSection.ELECTROMAGNETIC,
    }
    for const in CONSTANTS:
        if const.section in conversion_sections:
            assert const.category == ConstantCategory.CONVERSION
    assert CONSTANTS_DICT["M_PHI"].category == ConstantCategory.MATHEMATICAL


def test_depends_on_reads_formula_symbols():
    assert CONSTANTS_DICT["MSkm"].depends_on == ("G", "MSkg", "c0_2")
    assert CONSTANTS_DICT["c0_2"].depends_on == ("c0",)
    assert CONSTANTS_DICT["LmB_km"].depends_on == ("LmB_MeV", "cMeVkm")
    assert CONSTANTS_DICT["c0"].depends_on == ()
    assert CONSTANTS_DICT["M_2PI"].depends_on == ()


def test_relation_latex_is_filled_from_formula():
    const = CONSTANTS_DICT["cMeVfm3km2"]
    assert const.relation == sp.latex(const.eval_expr, symbol_names=constants._LATEX_NAMES)
    assert CONSTANTS_DICT["c0"].relation is None


def test_relation_latex_renders_powers_of_c0():
    """c0_3 is the cube of c0, not c with a double subscript."""
    relation = CONSTANTS_DICT["c0_4"].relation
    assert "c_0^{3}" in relation
    assert "c_{0 3}" not in relation
    assert "c_{0 2}" not in CONSTANTS_DICT["MSkm"].relation


def test_source_refs_are_immutable():
    refs = CONSTANTS_DICT["c0"].source_refs
    assert isinstance(refs, tuple)
    assert refs == (constants.CODATA_2014,)
    with pytest.raises(AttributeError):
        refs.append("https://example.org")
    assert CONSTANTS_DICT["MSkg"].source_refs == (constants.ALMANAC_2016,)


def test_records_are_frozen():
    const = CONSTANTS_DICT["G"]
    with pytest.raises(ValidationError):
        const.value = 6.67430e-11
    assert const.value == 6.67408e-11


def test_non_finite_value_is_rejected():
    with pytest.raises(ValidationError):
        ConstantInfo(
            name="bad",
            value=math.nan,
            category=ConstantCategory.REFERENCE,
            section=ConstantSection.REFERENCE,
        )


def test_derived_constant_needs_formula():
    with pytest.raises(ValidationError, match="eval_expr"):
        ConstantInfo(
            name="orphan",
            value=1.0,
            status=ConstantStatus.DERIVED,
            category=ConstantCategory.CONVERSION,
            section=ConstantSection.SI,
        )


def test_symbol_defaults_to_name():
    const = ConstantInfo(
        name="x_test",
        value=2.0,
        category=ConstantCategory.MATHEMATICAL,
        section=ConstantSection.MATHEMATICAL,
    )
    assert str(const.symbol) == "x_test"
    assert const.units == "dimensionless"
