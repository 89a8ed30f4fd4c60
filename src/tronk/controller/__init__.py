"""
The CONTROLLER layer turns user input (command lines, key presses) into
changes of the AppState, and runs the external inference process.
"""
