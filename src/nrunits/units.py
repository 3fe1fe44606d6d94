"""
Flat, read-only view of the unit table.

    from nrunits import units
    units.MSkm              # 1.4765690352573835
    units.lorene.LmB_km     # section group

Rebinding or deleting a constant raises AttributeError.
"""

import sys
import types

from nrunits.core.constants import SECTIONS, VALUES

globals().update(VALUES)
globals().update({section.attr: group for section, group in SECTIONS.items()})

__all__ = list(VALUES) + [section.attr for section in SECTIONS]


class ReadOnlyModule(types.ModuleType):
    """Module type whose exported names cannot be rebound or deleted."""

    def __setattr__(self, name, value):
        if name in self.__dict__.get("__all__", ()):
            raise AttributeError(f"cannot reassign constant {name!r}")
        super().__setattr__(name, value)

    def __delattr__(self, name):
        if name in self.__dict__.get("__all__", ()):
            raise AttributeError(f"cannot delete constant {name!r}")
        super().__delattr__(name)


sys.modules[__name__].__class__ = ReadOnlyModule
