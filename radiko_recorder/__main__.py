"""python -m radiko_recorder"""

from .cli import main

if __name__ == "__main__":
    main()
