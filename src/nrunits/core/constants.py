"""
Unit table for numerical relativity and astrophysics codes.

This file is the single source of truth for every natural constant, reference
value and conversion factor used when moving between gravitational units
(G = c = mu0/(4 pi) = 1, lengths in km) and nuclear, CGS, SI and
electromagnetic units.

Unless stated otherwise the natural constants are CODATA 2014 [1]. Solar and
earth masses come from the Astronomical Almanac 2016 [2], the nuclear
normalisations from LORENE [3].

[1]  P. J. Mohr et al., CODATA Recommended Values of the Fundamental Physical
     Constants: 2014, http://arxiv.org/abs/1507.07956v1
[2]  U.S. Nautical Almanac Office et al., The Astronomical Almanac - Selected
     Astronomical Constants 2016
[3]  Langage Objet pour la RElativite NumeriquE (LORENE), unites.h

Values are plain IEEE doubles computed once, in the operand order of their
formulas, so they are bit-identical to the reference table. The SymPy
``eval_expr`` attached to each derived entry restates the formula and is
checked against the float by ``nrunits.core.registry.validate_relations``.

Exports:
    - ConstantInfo: Pydantic model for constant metadata.
    - CONSTANTS: Ordered list of all constants (dependency order).
    - CONSTANTS_DICT: Name -> ConstantInfo.
    - SYMBOLS: Name -> SymPy symbol.
    - VALUES: Read-only name -> float mapping.
    - SECTIONS: Section -> immutable named tuple of values.
    - All constant names available as module attributes (floats).
"""

import math
from collections import namedtuple
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import sympy as sp
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nrunits.core.version import __version__, __date__

# --- Core Data Structures ---

class ConstantStatus(str, Enum):
    """Where a value comes from."""
    PRIMARY = "Primary"  # Literal from a reference
    DERIVED = "Derived"  # Follows from other entries


class ConstantCategory(str, Enum):
    """What kind of quantity a constant is."""
    NATURAL = "Natural constant"
    REFERENCE = "Reference value"
    CONVERSION = "Unit-conversion factor"
    MATHEMATICAL = "Mathematical constant"


class ConstantSection(str, Enum):
    """Organisational group of the table. Carries no runtime meaning."""
    NATURAL = "Natural constants"
    REFERENCE = "Reference values"
    NUCLEAR = "Gravitational units: nuclear"
    CGS = "Gravitational units: CGS"
    SI = "Gravitational units: SI"
    ELECTROMAGNETIC = "Electro-magnetic GSU units"
    LORENE = "Lorene units"
    MATHEMATICAL = "Mathematical constants"

    @property
    def attr(self) -> str:
        """Attribute name of the section group on ``nrunits.units``."""
        return self.name.lower()


CODATA_2014 = "http://arxiv.org/abs/1507.07956v1"
ALMANAC_2016 = "http://asa.usno.navy.mil/static/files/2016/Astronomical_Constants_2016.txt"
LORENE = "http://www.lorene.obspm.fr/"


class ConstantInfo(BaseModel):
    """Complete metadata and value of a single table entry."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Core identification
    name: str = Field(..., description="Canonical name (used as key)")
    symbol: Optional[sp.Symbol] = Field(None, description="SymPy symbol for analytics")

    # Value and units
    value: float = Field(..., description="IEEE double value")
    units: str = Field("dimensionless", description="Documented units, not enforced")

    # Documentation
    description: str = Field("", description="Brief description")
    category: ConstantCategory = Field(..., description="Kind of quantity")
    section: ConstantSection = Field(..., description="Table section")
    status: ConstantStatus = Field(ConstantStatus.PRIMARY)

    # Relations and provenance
    relation: Optional[str] = Field(None, description="Derivation formula (LaTeX)")
    eval_expr: Optional[sp.Expr] = Field(None, description="Evaluatable SymPy expression")
    documented: Optional[str] = Field(None, description="Value quoted in the reference table")
    source_refs: Tuple[str, ...] = Field(default_factory=tuple, description="URLs")

    @model_validator(mode="before")
    @classmethod
    def fill_symbol_and_relation(cls, data):
        if isinstance(data, dict):
            data = dict(data)
            if data.get("symbol") is None and data.get("name"):
                data["symbol"] = _sym(data["name"])
            if data.get("relation") is None and data.get("eval_expr") is not None:
                data["relation"] = sp.latex(data["eval_expr"], symbol_names=_LATEX_NAMES)
        return data

    @field_validator("value")
    @classmethod
    def value_is_finite(cls, v):
        if not math.isfinite(v):
            raise ValueError(f"constant value must be finite, got {v!r}")
        return v

    @model_validator(mode="after")
    def derived_needs_formula(self):
        if self.status == ConstantStatus.DERIVED and self.eval_expr is None:
            raise ValueError(f"derived constant {self.name!r} needs an eval_expr")
        return self

    @property
    def depends_on(self) -> Tuple[str, ...]:
        """Names of the table entries the formula reads."""
        if self.eval_expr is None:
            return ()
        return tuple(sorted(str(s) for s in self.eval_expr.free_symbols))


def _sym(name: str) -> sp.Symbol:
    return sp.Symbol(name, positive=True)


# Powers of c0 read as powers, not as double subscripts
_LATEX_NAMES = {
    _sym("c0"): "c_0",
    _sym("c0_2"): "c_0^{2}",
    _sym("c0_3"): "c_0^{3}",
    _sym("c0_4"): "c_0^{4}",
}


# --- Numerical values, in dependency order ---

# Natural constants
c0 = 299792458.0             # Speed of light in vacuum [m s^-1]
G = 6.67408e-11              # Newtonian constant of gravitation [m^3 kg^-1 s^-2]
mu0over4pi = 1e-7            # Magnetic vacuum permeability over 4 pi [m kg s^-2 A^-2]
kB = 1.38064852e-23          # Boltzmann constant [m^2 kg s^-2 K^-1]
hbar = 1.054571800e-34       # Planck constant over 2 pi [m^2 kg s^-1]

c0_2 = c0*c0
c0_3 = c0_2*c0
c0_4 = c0_3*c0
c0c0_cgs = c0_2 * 1e4

# Reference values
qe = 1.6021766208e-19        # Elementary charge [C]
mn = 939.5654133             # [MeV]
mp = 938.2720813             # [MeV]
me = 0.5109989461            # [MeV]

MSkg = 1.9884e+30
MSkm = MSkg*G/c0_2*1e-3
MEkg = 5.9722e+24
MEkm = MEkg*G/c0_2*1e-3

# Gravitational units: nuclear
cfm3km3 = 1e54
cMeVkm = G*qe/c0_4*1e3
cMeVfm3km2 = cMeVkm*cfm3km3

# Gravitational units: CGS
cdyncm2km2 = G/c0_4*1e5
cgcm3km2 = G/c0_2*1e9

# Gravitational units: SI
cHzkm = 1/c0*1e3
ckgm2s1km2 = G/c0_3*1e-6
ckgm2km3 = G/c0_2*1e-9
ckgm3km2 = G/c0_2*1e6

# Electro-magnetic. The two coefficients are sqrt(G/mu0over4pi) and
# sqrt(G*mu0over4pi) as tabulated; keep the literals.
_EM_FIELD = 0.02583424084427487
_EM_CHARGE = 2.583424084427487e-9

cTkm = 1.0/c0_2*_EM_FIELD*1e3
cA = 1.0/c0_2*_EM_CHARGE
cCkm = _EM_CHARGE/c0*1e-3
cV = _EM_FIELD/c0_3
cAm2km2 = cA*1e-6
cGskm = cTkm*1e-4
cGTkm = cTkm*1e+9

# Lorene
LrhoNuc_si = 1.66e+17
LrhoNuc_cgs = LrhoNuc_si * 1e-3
LrhoNuc_MeV = LrhoNuc_si*c0_2/qe*1e-51
LrhoNuc_km = LrhoNuc_si*ckgm3km2
LmB_MeV = 10*LrhoNuc_MeV
LmB_km = LmB_MeV*cMeVkm
LnNuc_fm = 0.1
LnNuc_km = LnNuc_fm*cfm3km3

# Mathematical
M_2PI = 6.28318530717958647692528676656
M_4PI = 12.5663706143591729538505735331
M_PI_SQARE = 9.86960440108935861883449099988
M_PHI = 1.61803398874989484820458683437


# --- Symbols for the derivation formulas ---
_c0, _c0_2, _c0_3, _c0_4 = (_sym(n) for n in ("c0", "c0_2", "c0_3", "c0_4"))
_G, _qe = _sym("G"), _sym("qe")
_em_field = sp.Float(repr(_EM_FIELD))
_em_charge = sp.Float(repr(_EM_CHARGE))

_NAT = dict(category=ConstantCategory.NATURAL, section=ConstantSection.NATURAL,
            source_refs=(CODATA_2014,))
_REF = dict(category=ConstantCategory.REFERENCE, section=ConstantSection.REFERENCE)
_NUC = dict(category=ConstantCategory.CONVERSION, section=ConstantSection.NUCLEAR)
_CGS = dict(category=ConstantCategory.CONVERSION, section=ConstantSection.CGS)
_SI = dict(category=ConstantCategory.CONVERSION, section=ConstantSection.SI)
_EM = dict(category=ConstantCategory.CONVERSION, section=ConstantSection.ELECTROMAGNETIC)
_LOR = dict(section=ConstantSection.LORENE, source_refs=(LORENE,))
_MATH = dict(category=ConstantCategory.MATHEMATICAL, section=ConstantSection.MATHEMATICAL)

_D = ConstantStatus.DERIVED


# === The Single Source of Truth: Constants Registry ===
CONSTANTS: List[ConstantInfo] = [

    # ========== 1. NATURAL CONSTANTS ==========

    ConstantInfo(name="c0", value=c0, units="m s^-1",
                 description="Speed of light in vacuum", **_NAT),
    ConstantInfo(name="G", value=G, units="m^3 kg^-1 s^-2",
                 description="Newtonian constant of gravitation", **_NAT),
    ConstantInfo(name="mu0over4pi", value=mu0over4pi, units="m kg s^-2 A^-2",
                 description="Magnetic vacuum permeability over 4 pi", **_NAT),
    ConstantInfo(name="kB", value=kB, units="m^2 kg s^-2 K^-1",
                 description="Boltzmann constant", **_NAT),
    ConstantInfo(name="hbar", value=hbar, units="m^2 kg s^-1",
                 description="Planck constant over 2 pi", **_NAT),

    ConstantInfo(name="c0_2", value=c0_2, units="m^2 s^-2", status=_D,
                 eval_expr=_c0*_c0,
                 description="Speed of light squared", **_NAT),
    ConstantInfo(name="c0_3", value=c0_3, units="m^3 s^-3", status=_D,
                 eval_expr=_c0_2*_c0,
                 description="Speed of light cubed", **_NAT),
    ConstantInfo(name="c0_4", value=c0_4, units="m^4 s^-4", status=_D,
                 eval_expr=_c0_3*_c0,
                 description="Speed of light to the fourth power", **_NAT),
    ConstantInfo(name="c0c0_cgs", value=c0c0_cgs, units="cm^2 s^-2", status=_D,
                 eval_expr=_c0_2*10**4, documented="8.98755e+20",
                 description="Speed of light squared in CGS", **_NAT),

    # ========== 2. REFERENCE VALUES ==========

    ConstantInfo(name="qe", value=qe, units="C",
                 description="Elementary charge", source_refs=(CODATA_2014,), **_REF),
    ConstantInfo(name="mn", value=mn, units="MeV",
                 description="Neutron mass", source_refs=(CODATA_2014,), **_REF),
    ConstantInfo(name="mp", value=mp, units="MeV",
                 description="Proton mass", source_refs=(CODATA_2014,), **_REF),
    ConstantInfo(name="me", value=me, units="MeV",
                 description="Electron mass", source_refs=(CODATA_2014,), **_REF),
    ConstantInfo(name="MSkg", value=MSkg, units="kg",
                 description="Solar mass", source_refs=(ALMANAC_2016,), **_REF),
    ConstantInfo(name="MSkm", value=MSkm, units="km", status=_D,
                 eval_expr=_sym("MSkg")*_G/_c0_2/1000, documented="1.47657",
                 description="Solar mass in gravitational units",
                 source_refs=(ALMANAC_2016,), **_REF),
    ConstantInfo(name="MEkg", value=MEkg, units="kg",
                 description="Earth mass", source_refs=(ALMANAC_2016,), **_REF),
    ConstantInfo(name="MEkm", value=MEkm, units="km", status=_D,
                 eval_expr=_sym("MEkg")*_G/_c0_2/1000, documented="4.4349e-06",
                 description="Earth mass in gravitational units",
                 source_refs=(ALMANAC_2016,), **_REF),

    # ========== 3. GRAVITATIONAL UNITS (G = c = mu0/4pi = 1) ==========

    ConstantInfo(name="cfm3km3", value=cfm3km3, units="km^-3 / fm^-3",
                 documented="1e+54",
                 description="Number density fm^-3 to km^-3", **_NUC),
    ConstantInfo(name="cMeVkm", value=cMeVkm, units="km / MeV", status=_D,
                 eval_expr=_G*_qe/_c0_4*1000, documented="1.32379e-60",
                 description="Energy MeV to km", **_NUC),
    ConstantInfo(name="cMeVfm3km2", value=cMeVfm3km2, units="km^-2 / (MeV fm^-3)", status=_D,
                 eval_expr=_sym("cMeVkm")*_sym("cfm3km3"), documented="1.32379e-06",
                 description="Energy density MeV fm^-3 to km^-2", **_NUC),

    ConstantInfo(name="cdyncm2km2", value=cdyncm2km2, units="km^-2 / (dyn cm^-2)", status=_D,
                 eval_expr=_G/_c0_4*10**5, documented="8.26245e-40",
                 description="Pressure dyn cm^-2 to km^-2", **_CGS),
    ConstantInfo(name="cgcm3km2", value=cgcm3km2, units="km^-2 / (g cm^-3)", status=_D,
                 eval_expr=_G/_c0_2*10**9, documented="7.42592e-19",
                 description="Mass density g cm^-3 to km^-2", **_CGS),

    ConstantInfo(name="cHzkm", value=cHzkm, units="km^-1 / Hz", status=_D,
                 eval_expr=1/_c0*1000, documented="3.33564e-6",
                 description="Frequency Hz to km^-1", **_SI),
    ConstantInfo(name="ckgm2s1km2", value=ckgm2s1km2, units="km^2 / (kg m^2 s^-1)", status=_D,
                 eval_expr=_G/_c0_3/10**6, documented="2.47702e-42",
                 description="Angular momentum kg m^2 s^-1 to km^2", **_SI),
    ConstantInfo(name="ckgm2km3", value=ckgm2km3, units="km^3 / (kg m^2)", status=_D,
                 eval_expr=_G/_c0_2/10**9, documented="7.42592e-37",
                 description="Moment of inertia kg m^2 to km^3", **_SI),
    ConstantInfo(name="ckgm3km2", value=ckgm3km2, units="km^-2 / (kg m^-3)", status=_D,
                 eval_expr=_G/_c0_2*10**6, documented="7.42592e-22",
                 description="Mass density kg m^-3 to km^-2", **_SI),

    # ========== 4. ELECTRO-MAGNETIC GSU UNITS ==========

    ConstantInfo(name="cTkm", value=cTkm, units="km^-1 / T", status=_D,
                 eval_expr=1/_c0_2*_em_field*1000, documented="2.87445e-16",
                 description="Magnetic field T to km^-1", **_EM),
    ConstantInfo(name="cA", value=cA, units="1 / A", status=_D,
                 eval_expr=1/_c0_2*_em_charge, documented="2.87445e-26",
                 description="Current A to geometric units", **_EM),
    ConstantInfo(name="cCkm", value=cCkm, units="km / C", status=_D,
                 eval_expr=_em_charge/_c0/1000, documented="8.61738e-21",
                 description="Charge C to km", **_EM),
    ConstantInfo(name="cV", value=cV, units="1 / V", status=_D,
                 eval_expr=_em_field/_c0_3, documented="9.58812e-28",
                 description="Potential V to geometric units", **_EM),
    ConstantInfo(name="cAm2km2", value=cAm2km2, units="km^2 / (A m^2)", status=_D,
                 eval_expr=_sym("cA")/10**6, documented="2.87445e-32",
                 description="Magnetic moment A m^2 to km^2", **_EM),
    ConstantInfo(name="cGskm", value=cGskm, units="km^-1 / Gs", status=_D,
                 eval_expr=_sym("cTkm")/10**4, documented="2.87445E-20",
                 description="Magnetic field Gauss to km^-1", **_EM),
    ConstantInfo(name="cGTkm", value=cGTkm, units="km^-1 / GT", status=_D,
                 eval_expr=_sym("cTkm")*10**9, documented="2.87445e-7",
                 description="Magnetic field GT to km^-1", **_EM),

    # ========== 5. LORENE UNITS ==========

    ConstantInfo(name="LrhoNuc_si", value=LrhoNuc_si, units="kg m^-3",
                 category=ConstantCategory.REFERENCE,
                 description="LORENE 'arbitrary' nuclear density", **_LOR),
    ConstantInfo(name="LrhoNuc_cgs", value=LrhoNuc_cgs, units="g cm^-3", status=_D,
                 category=ConstantCategory.REFERENCE,
                 eval_expr=_sym("LrhoNuc_si")/1000, documented="1.66e+14",
                 description="LORENE nuclear density in CGS", **_LOR),
    ConstantInfo(name="LrhoNuc_MeV", value=LrhoNuc_MeV, units="MeV fm^-3", status=_D,
                 category=ConstantCategory.REFERENCE,
                 eval_expr=_sym("LrhoNuc_si")*_c0_2/_qe/10**51, documented="93.11917937",
                 description="LORENE nuclear density as energy density", **_LOR),
    ConstantInfo(name="LrhoNuc_km", value=LrhoNuc_km, units="km^-2", status=_D,
                 category=ConstantCategory.REFERENCE,
                 eval_expr=_sym("LrhoNuc_si")*_sym("ckgm3km2"), documented="1.232702e-4",
                 description="LORENE nuclear density in gravitational units", **_LOR),
    ConstantInfo(name="LmB_MeV", value=LmB_MeV, units="MeV", status=_D,
                 category=ConstantCategory.REFERENCE,
                 eval_expr=10*_sym("LrhoNuc_MeV"), documented="931.1917937",
                 description="LORENE baryon mass", **_LOR),
    ConstantInfo(name="LmB_km", value=LmB_km, units="km", status=_D,
                 category=ConstantCategory.REFERENCE,
                 eval_expr=_sym("LmB_MeV")*_sym("cMeVkm"), documented="1.2327021e-57",
                 description="LORENE baryon mass in gravitational units", **_LOR),
    ConstantInfo(name="LnNuc_fm", value=LnNuc_fm, units="fm^-3",
                 category=ConstantCategory.REFERENCE,
                 description="LORENE 'arbitrary' nuclear baryon number density", **_LOR),
    ConstantInfo(name="LnNuc_km", value=LnNuc_km, units="km^-3", status=_D,
                 category=ConstantCategory.REFERENCE,
                 eval_expr=_sym("LnNuc_fm")*_sym("cfm3km3"), documented="1e53",
                 description="LORENE nuclear baryon number density in km^-3", **_LOR),

    # ========== 6. MATHEMATICAL CONSTANTS ==========

    ConstantInfo(name="M_2PI", value=M_2PI, eval_expr=2*sp.pi,
                 description="2 times Pi", **_MATH),
    ConstantInfo(name="M_4PI", value=M_4PI, eval_expr=4*sp.pi,
                 description="4 times Pi", **_MATH),
    ConstantInfo(name="M_PI_SQARE", value=M_PI_SQARE, eval_expr=sp.pi**2,
                 description="Pi squared", **_MATH),
    ConstantInfo(name="M_PHI", value=M_PHI, eval_expr=(sp.sqrt(5) + 1)/2,
                 description="Golden ratio (sqrt(5)+1)/2", **_MATH),
]

# --- Generate Derived Exports ---

CONSTANTS_DICT: Dict[str, ConstantInfo] = {c.name: c for c in CONSTANTS}

SYMBOLS: Dict[str, sp.Symbol] = {c.name: c.symbol for c in CONSTANTS}

VALUES: Mapping[str, float] = MappingProxyType({c.name: c.value for c in CONSTANTS})


def _section_tuple(section: ConstantSection):
    members = [c for c in CONSTANTS if c.section == section]
    cls_name = "".join(part.capitalize() for part in section.attr.split("_")) + "Units"
    group = namedtuple(cls_name, [c.name for c in members])
    return group(*(c.value for c in members))


SECTIONS: Mapping[ConstantSection, tuple] = MappingProxyType(
    {s: _section_tuple(s) for s in ConstantSection}
)


# --- Export all public names ---
__all__ = [
    # Core classes
    "ConstantInfo", "ConstantStatus", "ConstantCategory", "ConstantSection",
    # Main registry
    "CONSTANTS", "CONSTANTS_DICT", "SYMBOLS", "VALUES", "SECTIONS",
    # Version info
    "__version__", "__date__",
]

# Every constant is already a module-level float; list them for star imports
__all__.extend(c.name for c in CONSTANTS)
