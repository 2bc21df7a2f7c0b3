"""
Deterministic pricing calculators.

Pure Python math. No I/O, no shared state.
Given loosely-typed form fields, produce an immutable priced result.
"""
