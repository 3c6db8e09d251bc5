"""Use-case level logic.

These modules implement the record flows on top of the integration client and
the record store.

They should be:
- free of web/framework code
- unit-testable with fake clients and stores
"""
