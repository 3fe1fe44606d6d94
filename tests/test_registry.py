import io
import json

import pytest
import sympy as sp
import yaml
from rich.console import Console

from nrunits.core import registry
from nrunits.core.constants import (
    CONSTANTS,
    VALUES,
    ConstantCategory,
    ConstantInfo,
    ConstantSection,
    ConstantStatus,
    __version__,
)
from nrunits.core.registry import (
    _quoted_tolerance,
    as_record,
    check_documented_values,
    dependency_order,
    export_to_latex,
    export_to_yaml,
    get_constant,
    get_constants_by_category,
    print_registry,
    run_self_test,
    validate_relations,
)


def _derived(name, expr):
    return ConstantInfo(
        name=name,
        value=1.0,
        status=ConstantStatus.DERIVED,
        eval_expr=expr,
        category=ConstantCategory.CONVERSION,
        section=ConstantSection.SI,
    )


def test_validate_relations_finds_no_errors():
    """Self-validation should return an empty dict when all relations are consistent."""
    errors = validate_relations()
    assert not errors, f"Found relation validation errors: {errors}"


def test_validate_relations_reports_inconsistent_value(monkeypatch):
    """A wrong input value breaks every relation that reads it."""
    tampered = dict(VALUES)
    tampered["c0_2"] = VALUES["c0_2"] * 1.001
    monkeypatch.setattr(registry, "VALUES", tampered)

    errors = validate_relations()
    assert "c0_3" in errors
    assert "MSkm" in errors
    assert "c0_2" not in errors
    assert "rel_error" in errors["c0_3"]


def test_documented_values_agree():
    errors = check_documented_values()
    assert not errors, f"Documented values disagree: {errors}"


def test_quoted_tolerance():
    assert _quoted_tolerance("1.47657") == pytest.approx(5e-6)
    assert _quoted_tolerance("4.4349e-06") == pytest.approx(5e-11)
    assert _quoted_tolerance("1e+54") == 0.0


def test_registry_is_in_dependency_order():
    assert dependency_order() == [c.name for c in CONSTANTS]


def test_dependency_order_sorts_out_of_order_input():
    shuffled = list(reversed(CONSTANTS))
    order = dependency_order(shuffled)
    position = {name: i for i, name in enumerate(order)}
    for const in CONSTANTS:
        for dep in const.depends_on:
            assert position[dep] < position[const.name]


def test_dependency_cycle_is_rejected():
    a, b = sp.Symbol("a", positive=True), sp.Symbol("b", positive=True)
    with pytest.raises(ValueError, match="cycle"):
        dependency_order([_derived("a", 2 * b), _derived("b", 3 * a)])


def test_unknown_dependency_is_rejected():
    ghost = sp.Symbol("ghost", positive=True)
    with pytest.raises(ValueError, match="unknown constant 'ghost'"):
        dependency_order([_derived("x", ghost / 2)])


def test_get_constant_suggests_close_names():
    assert get_constant("MSkm").value == VALUES["MSkm"]
    with pytest.raises(KeyError, match="Did you mean: MSkm"):
        get_constant("MSKm")


def test_get_constants_by_category():
    mathematical = get_constants_by_category(ConstantCategory.MATHEMATICAL)
    assert [c.name for c in mathematical] == ["M_2PI", "M_4PI", "M_PI_SQARE", "M_PHI"]


def test_records_are_json_safe():
    for const in CONSTANTS:
        record = as_record(const)
        assert json.loads(json.dumps(record))["value"] == const.value

    record = as_record(get_constant("LmB_km"))
    assert record["depends_on"] == ["LmB_MeV", "cMeVkm"]
    assert record["documented"] == "1.2327021e-57"
    assert record["section"] == "Lorene units"


def test_export_to_yaml(tmp_path):
    path = tmp_path / "constants.yaml"
    export_to_yaml(str(path))

    data = yaml.safe_load(path.read_text())
    assert data["version"] == __version__
    assert list(data["constants"]) == [c.name for c in CONSTANTS]
    assert data["constants"]["c0"]["value"] == 299792458.0
    assert data["constants"]["MSkm"]["value"] == pytest.approx(VALUES["MSkm"], rel=1e-15)
    assert data["constants"]["MSkm"]["status"] == "Derived"


def test_export_to_latex(tmp_path):
    path = tmp_path / "constants.tex"
    export_to_latex(str(path))

    text = path.read_text()
    assert r"\begin{longtable}{llll}" in text
    assert r"LrhoNuc\_MeV" in text
    assert r"\textbf{Lorene units}" in text
    assert text.rstrip().endswith(r"\end{document}")


def test_print_registry_filters_by_section():
    buffer = io.StringIO()
    console = Console(file=buffer, width=200)
    print_registry(section=ConstantSection.LORENE, console=console)

    out = buffer.getvalue()
    assert "Lorene units" in out
    assert "LmB_km" in out
    assert "MSkm" not in out


def test_run_self_test():
    report = run_self_test()
    assert report.ok
    assert report.total == len(CONSTANTS)
    assert report.primary + report.derived == report.total
    assert report.sections == len(ConstantSection)


def test_print_registry_filters_by_status():
    buffer = io.StringIO()
    console = Console(file=buffer, width=200)
    print_registry(status=ConstantStatus.DERIVED, console=console)

    out = buffer.getvalue()
    assert "MSkm" in out
    assert "LmB_km" in out
    assert "hbar" not in out
    assert "Mathematical" not in out
