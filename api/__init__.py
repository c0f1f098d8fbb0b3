"""
Texify REST API
"""
