"""
PrisBanditt price-comparison backend.
"""
