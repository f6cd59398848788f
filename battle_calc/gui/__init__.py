"""Battle Calc HTTP API

A thin web interface over the combat engine: list unit archetypes and run
simulations from JSON requests.

Usage:
    python -m battle_calc.gui.run

Then open http://localhost:8000/docs in your browser.
"""

__version__ = "0.1.0"
