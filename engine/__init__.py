"""
Tape check engine — end-to-end mapping, validation and cleaning of a loan tape.
"""

from .runner import TapeCheckResult, run_tape_check, check_tape_file

__all__ = ["TapeCheckResult", "run_tape_check", "check_tape_file"]
