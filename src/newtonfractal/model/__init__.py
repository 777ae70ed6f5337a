"""
The MODEL layer contains the numerical engine.
It has NO knowledge of the GUI (Qt) or of any rendering.
It deals with Newton iteration, basin classification and the sample grid.
"""
