"""Parser for TestNG XML result reports."""

__version__ = '0.3'
