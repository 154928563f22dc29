"""
incomeview — annual income statements from FMP as a sortable, filterable table.
"""

__version__ = "0.1.0"
