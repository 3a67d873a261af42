"""auth/ -- Authentication and authorization package for UFind.

Layer rule: auth/ imports only core/, stdlib, and third-party libraries.
It does NOT import from api/ or items/.
api/ imports from auth/, not the other way around.
"""
