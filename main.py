#!/usr/bin/env python3
"""
ghost-images
Application entry point
"""

import sys

from src.cli import run_cli


def main():
    """Main function"""
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
