#!/usr/bin/env python3
"""
Contextual UI verification for the adaptive launcher

Prints how the generated launcher UI adapts to each routine, to focus level
changes and to incremental prediction updates.
"""

import sys

from adaptive_launcher.config import setup_logging
from adaptive_launcher.verification import (
    demonstrate_contextual_ui_generation,
    demonstrate_theme_adaptation,
)


def main():
    """Print both verification reports"""
    setup_logging()
    print("🚀 Adaptive Launcher: Contextual UI Verification")
    print("=" * 60)
    print(demonstrate_contextual_ui_generation())
    print()
    print(demonstrate_theme_adaptation())
    return 0


if __name__ == "__main__":
    sys.exit(main())
