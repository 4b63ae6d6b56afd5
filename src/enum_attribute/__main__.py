"""Allow ``python -m enum_attribute``."""

from enum_attribute.cli import main

if __name__ == "__main__":
    main()
