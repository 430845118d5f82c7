"""
Quantity calculation engine.

Pure Python math. No I/O.
Given an area (or length), a consumption rate and optional thickness or
consumption overrides, produce the required mass and the 20 kg package count.
"""
