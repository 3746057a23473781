"""
Data access for the Urban Impact Engine.
"""
