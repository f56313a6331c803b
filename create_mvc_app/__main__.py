"""Allow ``python -m create_mvc_app``."""

from create_mvc_app.cli import main

if __name__ == "__main__":
    main()
