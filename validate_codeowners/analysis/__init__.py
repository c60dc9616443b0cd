"""
CODEOWNERS file analysis: line splitting, owner classification, and
translation of file patterns into glob expressions.
"""

from validate_codeowners.analysis.analyzer import analyze_file, analyze_lines, locate_codeowners_file
from validate_codeowners.analysis.line_parser import parse_line
from validate_codeowners.analysis.owners import classify_owner_patterns
from validate_codeowners.analysis.patterns import find_unmatched_patterns, to_glob

__all__ = [
    "analyze_file",
    "analyze_lines",
    "classify_owner_patterns",
    "find_unmatched_patterns",
    "locate_codeowners_file",
    "parse_line",
    "to_glob",
]
