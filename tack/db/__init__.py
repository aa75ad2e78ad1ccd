"""Database helpers.

The drivers themselves do the work; these modules only assemble connection
strings and parameterized statements around them.
"""
