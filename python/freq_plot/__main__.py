"""
FreqPlot entry point

Run with: python -m freq_plot FILE.wav
"""

import sys


def main():
    """Main entry point for FreqPlot."""
    from .cli import main as cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
