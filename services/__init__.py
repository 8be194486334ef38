"""
Service layer: persistence, YouTube sync and AI growth analysis.
"""
