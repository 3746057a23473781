"""
Analysis components: flood spread and impact models.
"""
