#!/usr/bin/env python3
"""Configuration validation script."""

import argparse
import sys
from pathlib import Path

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fractional_ledger.config.loader import ConfigLoader
from fractional_ledger.config.validation import ConfigValidator


def main():
    """Main validation function."""
    parser = argparse.ArgumentParser(description="Validate ledger configuration")
    parser.add_argument("--config-dir", default=None,
                        help="Directory holding ledger.yaml (default: project config/)")
    args = parser.parse_args()

    loader = ConfigLoader.create(args.config_dir)
    print(f"🔍 Validating {loader.config_dir / 'ledger.yaml'}...")

    config = loader.merge_config()
    errors = ConfigValidator.validate_config(config)

    for section, values in config.items():
        print(f"\n📋 {section}")
        for key, value in values.items():
            print(f"  {key} = {value}")

    if errors:
        print(f"\n❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    print("\n✅ Ledger configuration is valid")
    sys.exit(0)


if __name__ == "__main__":
    main()
