"""
Run with: python -m tronk
"""
from tronk.main import main

if __name__ == "__main__":
    main()
