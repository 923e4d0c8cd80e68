"""
So that `python -m typetag FILE...` works the same as the console script.
"""
from .cmdline import main

main()
