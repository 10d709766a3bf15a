"""Module entrypoint for ``python -m revpicker``.

All argument parsing and setup happen in ``revpicker.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
