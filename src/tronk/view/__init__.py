"""
The VIEW layer: Qt widgets and dialogs. They render the AppState and route
user actions through the controllers.
"""
