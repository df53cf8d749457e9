"""
Code-coverage search: pick documents that together carry the requested codes.
"""
