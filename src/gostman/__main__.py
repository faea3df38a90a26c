"""Allow ``python -m gostman``."""

from .cli.main import main

if __name__ == "__main__":
    main()
