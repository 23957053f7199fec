"""
sasu_sim - SASU take-home income simulator

Estimates the annual net income (salary after withholding plus dividends
after flat tax) of a SASU officer, and keeps named parameter sets.

Modules:
    - domain: Pydantic data models and the income computation graph
    - application: live parameter state and the simulation store
    - services: key-value storage backends and exports
    - ui: Streamlit pages and components
"""

__version__ = "1.2.0"
