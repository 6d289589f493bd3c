"""
Formula Module.

Statutory nafkah iddah and mutaah formulas with range and out-of-scope
rules.
"""

from .engine import AwardType, FormulaCalculation, FormulaEngine, FormulaResult

__all__ = [
    'AwardType',
    'FormulaCalculation',
    'FormulaEngine',
    'FormulaResult',
]
