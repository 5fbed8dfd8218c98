"""
Web framework adapters consuming the public Logger interface.
"""
