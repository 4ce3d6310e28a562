"""bdlaw: structural and citation analysis of Bangladeshi statute text."""

__version__ = "0.1.0"
