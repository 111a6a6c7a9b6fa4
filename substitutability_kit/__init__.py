# Substitutability Kit
# Check that subtypes honor the behavioral contracts of their ancestors
# by sampling overridden and inherited operations

from .contracts import Contract, Inherited, Overridden, TypeDescriptor, INHERITED
from .engine import SubstitutabilityChecker, check
from .errors import ConfigurationError, InsufficientSamplesError, SubstitutabilityError
from .error_taxonomy import FindingTaxonomy
from .loader import Hierarchy, load_hierarchy, hierarchy_from_dict
from .report import ContractGap, Violation, ViolationReport

__all__ = [
    'Contract', 'Inherited', 'Overridden', 'TypeDescriptor', 'INHERITED',
    'SubstitutabilityChecker', 'check',
    'ConfigurationError', 'InsufficientSamplesError', 'SubstitutabilityError',
    'FindingTaxonomy',
    'Hierarchy', 'load_hierarchy', 'hierarchy_from_dict',
    'ContractGap', 'Violation', 'ViolationReport',
]
__version__ = '1.0.0'
