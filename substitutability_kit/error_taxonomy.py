"""
Substitutability Finding Taxonomy

Classify checker findings in plain language (for lesson feedback and reports).

Findings fall into 6 categories, each with:
- severity: 'critical' | 'high' | 'medium'
- kind: 'violation' (collected, counts against substitutability),
        'gap' (non-fatal warning) or 'fatal' (raised, no report)
- pattern: What went wrong technically
- impact: What it means for code that relies on the supertype
"""


class FindingTaxonomy:
    """Map finding categories to severities and impact statements."""

    CATEGORIES = {
        'behavior_divergence': {
            'severity': 'critical',
            'kind': 'violation',
            'pattern': 'Effective implementation returns an output the ancestor contract rejects',
            'example': 'Snake.move returns "Kaa slithers away" where Reptile promises "<name> crawls away"',
            'impact': 'Callers written against the supertype observe behavior they were never promised'
        },
        'implementation_error': {
            'severity': 'high',
            'kind': 'violation',
            'pattern': 'Implementation raised an exception for a sample input',
            'example': 'Override raises NotImplementedError where the parent returned a value',
            'impact': 'Substituting the subtype crashes code that worked with the supertype'
        },
        'predicate_error': {
            'severity': 'high',
            'kind': 'violation',
            'pattern': 'Contract predicate raised while judging an output',
            'example': 'Regex predicate applied to a non-string output',
            'impact': 'Output shape is incompatible with what the contract can even evaluate'
        },
        'contract_gap': {
            'severity': 'medium',
            'kind': 'gap',
            'pattern': 'Operation has no predicate declared by any ancestor',
            'example': 'Lizard adds bask() which no ancestor describes',
            'impact': 'Operation cannot be validated; this is not by itself a violation'
        },
        'unimplemented': {
            'severity': 'medium',
            'kind': 'gap',
            'pattern': 'Contract declared but no type in the chain implements the operation',
            'example': 'Reptile declares a move contract but neither it nor Snake defines move',
            'impact': 'Operation is abstract along this chain; nothing could be sampled'
        },
        'configuration_error': {
            'severity': 'critical',
            'kind': 'fatal',
            'pattern': 'Ancestor chain cycles, references an unknown type, or a declaration is invalid',
            'example': 'Snake -> LeglessReptile -> Snake',
            'impact': 'The check cannot run; no partial report is produced'
        }
    }

    @classmethod
    def classify(cls, category: str) -> dict:
        """
        Retrieve category info for a finding.

        Args:
            category: One of the 6 category keys

        Returns:
            Dict with severity, kind, pattern, example, impact
        """
        if category in cls.CATEGORIES:
            return cls.CATEGORIES[category]
        else:
            return {
                'severity': 'unknown',
                'kind': 'unknown',
                'pattern': 'Unknown finding category',
                'example': '',
                'impact': 'See logs for details'
            }

    @classmethod
    def all_categories(cls) -> list:
        """Return list of all finding category names."""
        return list(cls.CATEGORIES.keys())

    @classmethod
    def severity_level(cls, category: str) -> str:
        """Get severity of a finding category."""
        return cls.classify(category).get('severity', 'unknown')

    @classmethod
    def categories_of_kind(cls, kind: str) -> list:
        """Return the category names whose kind matches (violation, gap, fatal)."""
        return [name for name, info in cls.CATEGORIES.items() if info['kind'] == kind]
