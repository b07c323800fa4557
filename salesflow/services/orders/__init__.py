"""
Order lifecycle package: status enum, state machine, repository and service.
"""
