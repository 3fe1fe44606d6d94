"""
Lookup, validation and export utilities for the unit table.

Exports:
    - get_constant / get_constants_by_section / _by_category / _by_status
    - dependency_order: Topological order of the derivation graph.
    - validate_relations: Re-evaluate every SymPy formula against the stored float.
    - check_documented_values: Compare values with the figures quoted in the table.
    - as_record, export_to_yaml, export_to_latex, print_registry
    - run_self_test: Combined check returning a SelfTestReport.
"""

import difflib
from decimal import Decimal
from itertools import groupby
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from nrunits.core.constants import (
    CONSTANTS,
    CONSTANTS_DICT,
    SYMBOLS,
    VALUES,
    ConstantCategory,
    ConstantInfo,
    ConstantSection,
    ConstantStatus,
    __date__,
    __version__,
)
from nrunits.core.logging import logger

__all__ = [
    "get_constant",
    "get_constants_by_section",
    "get_constants_by_category",
    "get_constants_by_status",
    "dependency_order",
    "validate_relations",
    "check_documented_values",
    "as_record",
    "export_to_yaml",
    "export_to_latex",
    "print_registry",
    "SelfTestReport",
    "run_self_test",
]


# --- Lookup ---

def get_constant(name: str) -> ConstantInfo:
    """Return the entry for ``name``; unknown names raise KeyError with suggestions."""
    try:
        return CONSTANTS_DICT[name]
    except KeyError:
        close = difflib.get_close_matches(name, CONSTANTS_DICT.keys(), n=3)
        hint = f" Did you mean: {', '.join(close)}?" if close else ""
        raise KeyError(f"Unknown constant {name!r}.{hint}") from None


def get_constants_by_section(section: ConstantSection) -> List[ConstantInfo]:
    """Return all constants in a given table section, in table order."""
    return [c for c in CONSTANTS if c.section == section]


def get_constants_by_category(category: ConstantCategory) -> List[ConstantInfo]:
    """Return all constants of a given kind."""
    return [c for c in CONSTANTS if c.category == category]


def get_constants_by_status(status: ConstantStatus) -> List[ConstantInfo]:
    """Return all constants with a given status."""
    return [c for c in CONSTANTS if c.status == status]


# --- Dependency graph ---

def dependency_order(constants: Optional[Iterable[ConstantInfo]] = None) -> List[str]:
    """
    Return constant names so that every entry follows the entries its formula
    reads. Ties keep the input order, so an already ordered table comes back
    unchanged.

    Raises:
        ValueError: On a cycle or a reference to a name outside ``constants``.
    """
    constants = list(CONSTANTS if constants is None else constants)
    by_name = {c.name: c for c in constants}
    order: List[str] = []
    state: Dict[str, str] = {}

    def visit(name: str, chain: List[str]) -> None:
        if state.get(name) == "done":
            return
        if state.get(name) == "active":
            raise ValueError(f"Dependency cycle: {' -> '.join(chain + [name])}")
        state[name] = "active"
        for dep in by_name[name].depends_on:
            if dep not in by_name:
                raise ValueError(f"{name!r} depends on unknown constant {dep!r}")
            visit(dep, chain + [name])
        state[name] = "done"
        order.append(name)

    for const in constants:
        visit(const.name, [])
    return order


# --- Validation ---

def validate_relations(rel_tol: float = 1e-12) -> Dict[str, str]:
    """
    Evaluate every ``eval_expr`` with the table values substituted and compare
    with the stored float.

    Returns:
        dict: name -> error message; empty when every relation holds.
    """
    errors: Dict[str, str] = {}

    for const in CONSTANTS:
        if const.eval_expr is None:
            continue
        missing = [n for n in const.depends_on if n not in VALUES]
        if missing:
            errors[const.name] = f"Unknown symbols in relation: {', '.join(missing)}"
            continue

        subs = {SYMBOLS[n]: VALUES[n] for n in const.depends_on}
        try:
            result = float(const.eval_expr.subs(subs).evalf(30))
        except (TypeError, ValueError) as e:
            errors[const.name] = f"Could not evaluate {const.relation}: {e}"
            continue

        rel_error = abs(result - const.value) / abs(const.value)
        if rel_error > rel_tol:
            errors[const.name] = (
                f"Computed {result!r}, stated {const.value!r} (rel_error={rel_error:.2e})"
            )

    logger.debug(f"Validated relations: {len(errors)} error(s)")
    return errors


def _quoted_tolerance(documented: str) -> float:
    """Half a unit in the last quoted digit; single-digit figures are exact."""
    _, digits, exponent = Decimal(documented).as_tuple()
    if len(digits) < 2:
        return 0.0
    return 0.5 * 10.0 ** exponent


def check_documented_values(rel_tol: float = 1e-6) -> Dict[str, str]:
    """
    Compare each value against the figure quoted beside it in the reference
    table. The tolerance is the looser of ``rel_tol`` and half a unit in the
    last quoted digit.
    """
    errors: Dict[str, str] = {}

    for const in CONSTANTS:
        if const.documented is None:
            continue
        quoted = float(const.documented)
        tolerance = max(rel_tol * abs(quoted), _quoted_tolerance(const.documented))
        if abs(const.value - quoted) > tolerance:
            errors[const.name] = (
                f"Value {const.value!r} differs from quoted {const.documented} "
                f"by more than {tolerance:.3e}"
            )
            logger.warning(f"{const.name}: {errors[const.name]}")

    return errors


# --- Export ---

def as_record(const: ConstantInfo) -> Dict[str, Any]:
    """Plain, JSON/YAML-safe dictionary for one constant."""
    record: Dict[str, Any] = {
        "name": const.name,
        "value": const.value,
        "units": const.units,
        "description": const.description,
        "category": const.category.value,
        "section": const.section.value,
        "status": const.status.value,
    }
    if const.relation:
        record["relation"] = const.relation
        record["depends_on"] = list(const.depends_on)
    if const.documented:
        record["documented"] = const.documented
    if const.source_refs:
        record["references"] = list(const.source_refs)
    return record


def export_to_yaml(filename: str = "constants.yaml") -> None:
    """Export all constants to YAML format for external tools."""
    data = {
        "version": __version__,
        "date": __date__,
        "constants": {},
    }

    for const in CONSTANTS:
        entry = as_record(const)
        del entry["name"]
        data["constants"][const.name] = entry

    with open(filename, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    logger.info(f"Exported {len(CONSTANTS)} constants to {filename}")


def export_to_latex(filename: str = "constants.tex") -> None:
    """Generate LaTeX table of constants for documentation."""
    lines = [
        r"\documentclass{article}",
        r"\usepackage{booktabs}",
        r"\usepackage{longtable}",
        r"\begin{document}",
        r"\begin{longtable}{llll}",
        r"\toprule",
        r"Name & Value & Units & Relation \\",
        r"\midrule",
    ]

    for section, group in groupby(CONSTANTS, key=lambda c: c.section):
        lines.append(rf"\multicolumn{{4}}{{l}}{{\textbf{{{section.value}}}}} \\")
        for const in group:
            name_escaped = const.name.replace("_", r"\_")
            units = const.units.replace("^", r"\^{}")
            relation = f"${const.relation}$" if const.relation else "—"
            lines.append(f"{name_escaped} & {const.value:.6e} & {units} & {relation} \\\\")

    lines.extend([
        r"\bottomrule",
        r"\end{longtable}",
        r"\end{document}",
    ])

    with open(filename, "w") as f:
        f.write("\n".join(lines))
    logger.info(f"Exported LaTeX table to {filename}")


def print_registry(section: Optional[ConstantSection] = None,
                   status: Optional[ConstantStatus] = None,
                   console: Optional[Console] = None) -> None:
    """
    Pretty-print the constants registry as one rich table per section.

    Args:
        section: Filter by section
        status: Filter by status
        console: Target console (default: a new stdout console)
    """
    console = console or Console()
    constants = CONSTANTS
    if section:
        constants = [c for c in constants if c.section == section]
    if status:
        constants = [c for c in constants if c.status == status]

    for sec, group in groupby(constants, key=lambda c: c.section):
        table = Table(title=sec.value, title_justify="left")
        table.add_column("Name", style="bold cyan", no_wrap=True)
        table.add_column("Value", justify="right")
        table.add_column("Units", style="dim")
        table.add_column("Relation", style="green")
        for const in group:
            table.add_row(const.name, repr(const.value), const.units, const.relation or "")
        console.print(table)


# --- Self test ---

class SelfTestReport(BaseModel):
    """Outcome of ``run_self_test``."""
    relation_errors: Dict[str, str] = Field(default_factory=dict)
    documented_errors: Dict[str, str] = Field(default_factory=dict)
    dependency_error: Optional[str] = None
    total: int = 0
    primary: int = 0
    derived: int = 0
    sections: int = 0

    @property
    def ok(self) -> bool:
        return not (self.relation_errors or self.documented_errors or self.dependency_error)


def run_self_test() -> SelfTestReport:
    """Run every self-consistency check on the table."""
    dependency_error = None
    try:
        order = dependency_order()
        if order != [c.name for c in CONSTANTS]:
            dependency_error = "Registry is not in dependency order"
    except ValueError as e:
        dependency_error = str(e)

    report = SelfTestReport(
        relation_errors=validate_relations(),
        documented_errors=check_documented_values(),
        dependency_error=dependency_error,
        total=len(CONSTANTS),
        primary=len(get_constants_by_status(ConstantStatus.PRIMARY)),
        derived=len(get_constants_by_status(ConstantStatus.DERIVED)),
        sections=len({c.section for c in CONSTANTS}),
    )
    if report.ok:
        logger.info(f"Self test passed for {report.total} constants")
    else:
        logger.error("Self test failed")
    return report
