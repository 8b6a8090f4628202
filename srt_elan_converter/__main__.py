"""Package entry point for ``python -m srt_elan_converter``."""

from srt_elan_converter.cli import main

if __name__ == "__main__":
    main()
