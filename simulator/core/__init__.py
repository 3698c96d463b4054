"""
Scenario engine.

Messages, variables, validation, scenarios, mappers, endpoints, executor
and dispatcher.
"""
