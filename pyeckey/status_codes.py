"""
Status codes returned by the pyeckey CLI
"""
STATUS_SUCCESS = 0
STATUS_FAILURE = 1
