"""
SwarSeva Service Directory

A multilingual directory of government services that checks applicant
eligibility, calculates fees and validates submitted documents.
"""

__version__ = "1.0.0"
__description__ = "Multilingual government service directory with eligibility, fee and document checks"
