"""examgrade - answer grading for the exam portal.

Subpackages:
- examgrade.answer: Normalization, per-type evaluators, graded answer records
- examgrade.core: Configuration, logging and error types
- examgrade.cli: Command line front end for grading JSON submissions
"""

__version__ = "0.1.0"

__all__ = []
