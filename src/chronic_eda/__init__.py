# ========================
# src/chronic_eda/__init__.py
# ========================

"""
Chronic Disease Indicators EDA

Cleans, normalizes and summarizes the chronic disease indicator dataset.
"""

__version__ = "1.0.0"
