"""
Document catalog: PDF uploads plus their name, date and classification codes.
"""
