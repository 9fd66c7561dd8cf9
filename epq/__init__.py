"""
epq - Answer validation and blank normalization for exam practice questions

Subpackages:
- epq.answer: grade a submitted answer for any supported question type
- epq.blanks: normalize blank notations and question text at import time
"""

__version__ = "0.1.0"
