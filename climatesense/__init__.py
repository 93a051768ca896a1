"""ClimateSense - Autonomous Climate Architect.

This package contains the Python web application for the ClimateSense
passive-design studio.

Architecture:
- Design Service: structured prompts to an LLM for climate, layout,
  refinement, diagnostics and optimization verdicts
- Design Controller: Generate / Refine / Diagnose workflows over a single
  immutable design state
- Renderer: SVG floor plans with heat, airflow and daylight overlays
- Flask app: form page and JSON API
"""

__version__ = "1.0.0"
