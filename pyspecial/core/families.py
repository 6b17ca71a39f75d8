"""
Distribution family tags for PySpecial.

This module is the SINGLE SOURCE OF TRUTH for family strings.
Import from here, never use raw strings.

Usage:
    from pyspecial.core.families import FAMILY_STUDENTS_T
    from pyspecial.distributions import make_distribution

    d = make_distribution(FAMILY_STUDENTS_T, 10)
"""

# Student's t distribution, shape parameter: degrees of freedom (> 0)
FAMILY_STUDENTS_T = 'students_t'

# All families as a frozenset for validation
ALL_FAMILIES = frozenset({
    FAMILY_STUDENTS_T,
})

# Accepted spellings, normalised by make_distribution()
FAMILY_ALIASES = {
    'students_t': FAMILY_STUDENTS_T,
    'student_t': FAMILY_STUDENTS_T,
    't': FAMILY_STUDENTS_T,
}

__all__ = [
    'FAMILY_STUDENTS_T',
    'ALL_FAMILIES',
    'FAMILY_ALIASES',
]
