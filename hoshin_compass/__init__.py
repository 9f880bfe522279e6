"""
Hoshin Success Compass

Five "I/We must" statements, ten directed links between them, strict
authoring rules, and a deterministic priority ranking.
"""
__version__ = "0.1.0"
