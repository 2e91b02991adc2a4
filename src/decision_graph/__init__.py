"""
Decision Graph Package

A validated, data-driven model of a branching questionnaire that leads a user
to a final recommendation, plus the engine that walks it.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Page rendering or styling
    - Navigation markup
    - Static-site generation
    - Hosting

This package defines GRAPH STRUCTURE and TRAVERSAL only.

Renderers (web pages, the bundled CLI) consume the read-only state exposed by
decision_graph.engine and never reach into the graph's links themselves.
"""

__version__ = "0.1.0"
