"""
The MODEL layer contains pure data structures and business state.
It has NO knowledge of the GUI (Qt widgets).
It deals with cards, undo history, grid layout and I/O.
"""
