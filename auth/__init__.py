"""auth/ -- Authentication and authorization package for FormBot.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/ or forms/.
api/ imports from auth/, not the other way around.
"""
