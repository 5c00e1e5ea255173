"""
Serving Module
"""
