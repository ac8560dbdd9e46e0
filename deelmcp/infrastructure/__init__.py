"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the application to the outside world (the Deel REST API, the stdio
tool transport, the console) by implementing the interfaces defined in the
domain layer.
"""
