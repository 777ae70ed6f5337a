"""
The CONTROLLER layer runs the engine in background threads and exposes
Qt Signals to whatever presents the results.
"""
